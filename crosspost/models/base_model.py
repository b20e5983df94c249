# crosspost/models/base_model.py

from bson import ObjectId

from ..extensions.db import db


class BaseModel:
    """
    Base class for collection-backed models. Subclasses set `collection_name`
    and expose classmethods; documents come back as plain dicts with string ids.
    """
    collection_name = None

    @classmethod
    def get_collection(cls):
        return db.get_collection(cls.collection_name)

    @staticmethod
    def to_object_id(value):
        if isinstance(value, ObjectId):
            return value
        if value is None or not ObjectId.is_valid(str(value)):
            return None
        return ObjectId(str(value))

    @staticmethod
    def normalise(doc, *id_fields):
        """Stringify `_id` plus any ObjectId reference fields."""
        if not doc:
            return doc
        for key in ("_id",) + id_fields:
            if doc.get(key) is not None:
                doc[key] = str(doc[key])
        return doc
