"""Base repository with common Firestore operations"""
from typing import TypeVar, Generic, Dict, Any, List, Optional, Tuple
from abc import ABC, abstractmethod
from config.firebase_config import get_db


T = TypeVar('T')


class BaseRepository(ABC, Generic[T]):
    """Abstract base repository for Firestore CRUD operations"""

    def __init__(self, collection_name: str):
        """
        Initialize repository with collection name

        Args:
            collection_name: Name of Firestore collection
        """
        self.collection_name = collection_name

    @property
    def db(self):
        return get_db()

    @property
    def collection(self):
        return self.db.collection(self.collection_name)

    @abstractmethod
    def to_model(self, data: Dict[str, Any]) -> T:
        """Convert Firestore document to model"""
        pass

    @abstractmethod
    def to_dict(self, model: T) -> Dict[str, Any]:
        """Convert model to Firestore document"""
        pass

    def _from_snapshot(self, doc) -> T:
        data = doc.to_dict() or {}
        data['id'] = doc.id
        return self.to_model(data)

    def create(self, doc_id: str, model: T) -> T:
        """
        Create a new document

        Args:
            doc_id: Document ID
            model: Model instance to create

        Returns:
            Created model
        """
        doc_data = self.to_dict(model)
        self.collection.document(doc_id).set(doc_data)
        if hasattr(model, 'id'):
            model.id = doc_id
        return model

    def add(self, model: T) -> T:
        """
        Create a new document with an auto-generated ID

        Args:
            model: Model instance to create

        Returns:
            Created model with its `id` set
        """
        doc_ref = self.collection.document()
        doc_ref.set(self.to_dict(model))
        model.id = doc_ref.id
        return model

    def get(self, doc_id: str) -> Optional[T]:
        """
        Get a document by ID

        Args:
            doc_id: Document ID

        Returns:
            Model instance or None if not found
        """
        if not doc_id:
            return None
        doc = self.collection.document(doc_id).get()
        if doc.exists:
            return self._from_snapshot(doc)
        return None

    def exists(self, doc_id: str) -> bool:
        if not doc_id:
            return False
        return self.collection.document(doc_id).get().exists

    def update(self, doc_id: str, model: T) -> T:
        """
        Update an existing document

        Args:
            doc_id: Document ID
            model: Updated model instance

        Returns:
            Updated model
        """
        doc_data = self.to_dict(model)
        self.collection.document(doc_id).set(doc_data, merge=True)
        return model

    def update_fields(self, doc_id: str, fields: Dict[str, Any]) -> None:
        """
        Merge a partial set of fields into an existing document

        Args:
            doc_id: Document ID
            fields: Field values to write
        """
        self.collection.document(doc_id).set(fields, merge=True)

    def delete(self, doc_id: str) -> bool:
        """
        Delete a document by ID

        Args:
            doc_id: Document ID

        Returns:
            True if deleted
        """
        self.collection.document(doc_id).delete()
        return True

    def list_all(self) -> List[T]:
        """
        Get all documents in collection

        Returns:
            List of models
        """
        docs = self.collection.stream()
        return [self._from_snapshot(doc) for doc in docs]

    def query(self, field: str, operator: str, value: Any) -> List[T]:
        """
        Query documents by field

        Args:
            field: Field name
            operator: Comparison operator (==, <, >, <=, >=, !=, array-contains)
            value: Value to compare

        Returns:
            List of models
        """
        return self.query_all([(field, operator, value)])

    def query_all(self, filters: List[Tuple[str, str, Any]]) -> List[T]:
        """
        Query documents matching every (field, operator, value) filter

        Args:
            filters: Filters chained with AND

        Returns:
            List of models
        """
        query = self.collection
        for field, operator, value in filters:
            query = query.where(field, operator, value)
        return [self._from_snapshot(doc) for doc in query.stream()]

    def count(self, field: str = None, operator: str = '==', value: Any = None) -> int:
        if field is None:
            return len(list(self.collection.stream()))
        return len(list(self.collection.where(field, operator, value).stream()))

    def batch_delete(self, doc_ids: List[str]) -> int:
        """
        Delete several documents in one batch

        Args:
            doc_ids: Document IDs to delete

        Returns:
            Number of deletions committed
        """
        if not doc_ids:
            return 0
        batch = self.db.batch()
        for doc_id in doc_ids:
            batch.delete(self.collection.document(doc_id))
        batch.commit()
        return len(doc_ids)
