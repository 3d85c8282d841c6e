import os
import sys

import uvicorn

scripts_dir = os.path.dirname(os.path.abspath(__file__))
backend_root = os.path.join(os.path.dirname(scripts_dir), "backend")
if backend_root not in sys.path:
    sys.path.insert(0, backend_root)

if __name__ == "__main__":
    host = os.getenv("STORE_HOST", "0.0.0.0")
    port = int(os.getenv("STORE_PORT", "5000"))
    uvicorn.run("studentdesk.main:app", host=host, port=port, reload=os.getenv("STORE_RELOAD") == "1")
