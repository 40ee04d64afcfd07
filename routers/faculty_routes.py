import logging
from typing import Union

from bson import ObjectId
from bson.errors import InvalidId
from fastapi import APIRouter, Depends, File, UploadFile
from pymongo import ReturnDocument
from pymongo.database import Database
from pymongo.errors import PyMongoError

from models.faculty_model import LIST_FIELDS, FacultyForm, serialize_faculty
from utils.database import FACULTIES, get_db
from utils.exceptions import InternalError, NotFoundError
from utils.uploads import PhotoStore, get_photo_store

logger = logging.getLogger(__name__)

router = APIRouter()


def find_faculty(db: Database, faculty_id: str) -> dict:
    faculty = db[FACULTIES].find_one({"_id": ObjectId(faculty_id)})
    if not faculty:
        raise NotFoundError()
    return faculty


@router.post("")
def add_faculty(
    form: FacultyForm = Depends(FacultyForm.as_form),
    photo: Union[UploadFile, str, None] = File(None),
    db: Database = Depends(get_db),
    photos: PhotoStore = Depends(get_photo_store),
):
    stored_photo = None
    try:
        stored_photo = photos.save(photo)
        faculty = form.to_document()
        faculty["photo"] = stored_photo or ""
        result = db[FACULTIES].insert_one(faculty)
    except (PyMongoError, OSError) as e:
        photos.discard(stored_photo)
        logger.exception("Error saving faculty")
        raise InternalError("Error saving faculty") from e

    logger.info("Created faculty %s", result.inserted_id)
    return {"success": True, "message": "Faculty saved successfully!"}


@router.get("")
def get_faculties(db: Database = Depends(get_db)):
    try:
        faculties = list(db[FACULTIES].find({}, {field: 1 for field in LIST_FIELDS}))
    except PyMongoError as e:
        logger.exception("Error fetching faculty list")
        raise InternalError("Error fetching faculty") from e
    return [serialize_faculty(faculty) for faculty in faculties]


@router.get("/{faculty_id}")
def get_faculty(faculty_id: str, db: Database = Depends(get_db)):
    try:
        faculty = find_faculty(db, faculty_id)
    except (InvalidId, PyMongoError) as e:
        logger.exception("Error fetching faculty %s", faculty_id)
        raise InternalError("Error fetching faculty") from e
    return serialize_faculty(faculty)


@router.put("/{faculty_id}")
def update_faculty(
    faculty_id: str,
    form: FacultyForm = Depends(FacultyForm.as_form),
    photo: Union[UploadFile, str, None] = File(None),
    db: Database = Depends(get_db),
    photos: PhotoStore = Depends(get_photo_store),
):
    new_photo = None
    try:
        faculty = find_faculty(db, faculty_id)
        updated_data = form.to_document()
        new_photo = photos.save(photo)
        if new_photo:
            updated_data["photo"] = new_photo

        updated_faculty = faculty
        if updated_data:
            updated_faculty = db[FACULTIES].find_one_and_update(
                {"_id": faculty["_id"]},
                {"$set": updated_data},
                return_document=ReturnDocument.AFTER,
            )
        if updated_faculty is None:
            # deleted between the lookup and the update
            raise NotFoundError()
    except NotFoundError:
        photos.discard(new_photo)
        raise
    except (InvalidId, PyMongoError, OSError) as e:
        photos.discard(new_photo)
        logger.exception("Error updating faculty %s", faculty_id)
        raise InternalError("Error updating faculty") from e

    # the old file goes only once the record points at the new one
    old_photo = faculty.get("photo")
    if new_photo and old_photo and old_photo != new_photo:
        photos.discard(old_photo)

    return {
        "success": True,
        "message": "Faculty updated successfully!",
        "faculty": serialize_faculty(updated_faculty),
    }


@router.delete("/{faculty_id}")
def delete_faculty(
    faculty_id: str,
    db: Database = Depends(get_db),
    photos: PhotoStore = Depends(get_photo_store),
):
    try:
        deleted = db[FACULTIES].find_one_and_delete({"_id": ObjectId(faculty_id)})
    except (InvalidId, PyMongoError) as e:
        logger.exception("Error deleting faculty %s", faculty_id)
        raise InternalError("Error deleting faculty") from e
    if not deleted:
        raise NotFoundError()

    photos.discard(deleted.get("photo"))
    logger.info("Deleted faculty %s", faculty_id)
    return {"success": True, "message": "Faculty deleted successfully"}
