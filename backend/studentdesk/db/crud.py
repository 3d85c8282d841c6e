# studentdesk/db/crud.py

# --- Core Imports ---
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ReturnDocument, ASCENDING
from pymongo.errors import PyMongoError
from typing import List, Optional, Dict, Any
from datetime import datetime, timezone
import logging

# --- Database Access ---
from .database import get_database

# --- Models & Errors ---
from studentdesk.models.student import StoredStudent, WireStudentDraft
from studentdesk.core.exceptions import StoreUnavailable

# --- Logging Setup ---
logger = logging.getLogger(__name__)

# --- MongoDB Collection Names ---
STUDENT_COLLECTION = "students"
COUNTER_COLLECTION = "counters"

# --- Helper Functions ---
def _get_collection(collection_name: str) -> AsyncIOMotorCollection:
    db = get_database()
    if db is not None:
        return db[collection_name]
    logger.error("Database connection is not available (db object is None). Cannot get collection.")
    raise StoreUnavailable("Database connection is not available")

def _doc_to_student(doc: Dict[str, Any]) -> StoredStudent:
    mapped_data = {**doc}
    if "_id" in mapped_data:
        mapped_data["id"] = mapped_data.pop("_id")
    return StoredStudent(**mapped_data)

def _draft_to_doc(student_in: WireStudentDraft) -> Dict[str, Any]:
    # Stored under the wire names ("class", "siblings")
    return student_in.model_dump(mode="json", by_alias=True)

# --- Identifier Allocation ---
async def get_next_student_id(session=None) -> int:
    """Atomically allocates the next integer student id from the counters collection."""
    counters = _get_collection(COUNTER_COLLECTION)
    try:
        counter_doc = await counters.find_one_and_update(
            {"_id": STUDENT_COLLECTION},
            {"$inc": {"seq": 1}},
            upsert=True,
            return_document=ReturnDocument.AFTER,
            session=session,
        )
    except PyMongoError as e:
        logger.error(f"Error allocating student id: {e}", exc_info=True)
        raise StoreUnavailable(f"Could not allocate a student id: {e}")
    return int(counter_doc["seq"])

# --- Student CRUD Functions ---
async def create_student(student_in: WireStudentDraft, session=None) -> int:
    collection = _get_collection(STUDENT_COLLECTION)
    now = datetime.now(timezone.utc)

    new_student_id = await get_next_student_id(session=session)
    student_doc = _draft_to_doc(student_in)
    student_doc["_id"] = new_student_id
    student_doc["created_at"] = now
    student_doc["updated_at"] = now

    logger.info(f"Inserting student with id: {new_student_id}")
    try:
        inserted_result = await collection.insert_one(student_doc, session=session)
    except PyMongoError as e:
        logger.error(f"Error inserting student {new_student_id}: {e}", exc_info=True)
        raise StoreUnavailable(f"Could not insert student: {e}")
    if not inserted_result.acknowledged:
        logger.error(f"Insert student not acknowledged: {new_student_id}")
        raise StoreUnavailable("Insert was not acknowledged by the database")
    return new_student_id

async def get_student_by_id(student_id: int, session=None) -> Optional[StoredStudent]:
    collection = _get_collection(STUDENT_COLLECTION)
    logger.info(f"Getting student: {student_id}")
    try:
        student_doc = await collection.find_one({"_id": student_id}, session=session)
    except PyMongoError as e:
        logger.error(f"Error getting student {student_id}: {e}", exc_info=True)
        raise StoreUnavailable(f"Could not read student: {e}")
    if student_doc is None:
        logger.warning(f"Student {student_id} not found.")
        return None
    return _doc_to_student(student_doc)

async def get_all_students(session=None) -> List[StoredStudent]:
    """Returns every student in insertion order (ascending id)."""
    collection = _get_collection(STUDENT_COLLECTION)
    students_list: List[StoredStudent] = []
    try:
        cursor = collection.find({}, session=session).sort("_id", ASCENDING)
        async for doc in cursor:
            try:
                students_list.append(_doc_to_student(doc))
            except ValueError as validation_err:
                logger.error(f"Skipping invalid student doc {doc.get('_id', 'UNKNOWN_ID')}: {validation_err}")
    except PyMongoError as e:
        logger.error(f"Error getting all students during DB query: {e}", exc_info=True)
        raise StoreUnavailable(f"Could not list students: {e}")
    return students_list

async def update_student(student_id: int, student_in: WireStudentDraft, session=None) -> bool:
    """Replaces a student's fields. Returns False when no student has that id."""
    collection = _get_collection(STUDENT_COLLECTION)
    update_data = _draft_to_doc(student_in)
    update_data["updated_at"] = datetime.now(timezone.utc)
    logger.info(f"Updating student {student_id}")
    try:
        result = await collection.update_one({"_id": student_id}, {"$set": update_data}, session=session)
    except PyMongoError as e:
        logger.error(f"Error during student update operation for {student_id}: {e}", exc_info=True)
        raise StoreUnavailable(f"Could not update student: {e}")
    if result.matched_count == 0:
        logger.warning(f"Student {student_id} not found for update.")
        return False
    return True

async def delete_student(student_id: int, session=None) -> bool:
    """Hard-deletes a student. Returns False when no student has that id."""
    collection = _get_collection(STUDENT_COLLECTION)
    logger.info(f"Deleting student {student_id}")
    try:
        result = await collection.delete_one({"_id": student_id}, session=session)
    except PyMongoError as e:
        logger.error(f"Error deleting student {student_id}: {e}", exc_info=True)
        raise StoreUnavailable(f"Could not delete student: {e}")
    if result.deleted_count == 1:
        logger.info(f"Successfully deleted student {student_id}")
        return True
    logger.warning(f"Student {student_id} not found for delete.")
    return False
