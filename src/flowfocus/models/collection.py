"""
FlowFocus Collections

This module provides the generic in-memory collection that backs every entity
type. A collection keeps an ordered list of records, an optional active
selection and the current search/filter criteria, and schedules a save of the
whole collection after every mutation.
"""

import logging
from typing import Any, Dict, Generic, List, Mapping, Optional, Sequence, Tuple, Type, TypeVar

from pydantic import ValidationError

from .entities import Entity
from .storage import LocalPersistence
from ..exceptions import ImportFormatError
from ..utils import generate_entity_id, get_datetime_now

# Set up module logger
logger = logging.getLogger(__name__)

T = TypeVar('T', bound=Entity)


class Collection(Generic[T]):
    """
    Base class for entity collections synced to local persistence.

    Subclasses set the class attributes describing their entity type and may
    override ``_default_fields``, ``_matches_filter`` and ``_sort_key``.
    """

    storage_key: str = ""
    entity_model: Type[T]
    id_prefix: str = ""
    searchable_fields: Tuple[str, ...] = ()
    required_import_fields: Tuple[str, ...] = ("id",)
    immutable_fields: Tuple[str, ...] = ("id",)
    touches_updated_at: bool = False

    def __init__(
        self,
        persistence: LocalPersistence,
        default_items: Optional[Sequence[T]] = None
    ) -> None:
        """
        Load the collection from persistence.

        Args:
            persistence: Adapter the collection reads from and saves to
            default_items: Collection used when nothing usable is stored;
                the class default is used when None
        """
        self.persistence = persistence
        defaults = self.default_items() if default_items is None else list(default_items)
        self._items: List[T] = persistence.load_collection(self.storage_key, self.entity_model, defaults)
        self.active_id: Optional[str] = None
        self.search_term: str = ""
        self.filter_value: Optional[str] = None

        view = self.view()
        if view:
            self.active_id = view[0].id

        logger.debug(f"Loaded {len(self._items)} records from '{self.storage_key}'")

    # ------------------------------------------------------------------
    # Defaults and hooks
    # ------------------------------------------------------------------

    @classmethod
    def default_items(cls) -> List[T]:
        """Built-in collection used on first run."""
        return []

    def _default_fields(self) -> Dict[str, Any]:
        """Field values applied under the caller's fields on create."""
        return {}

    def _matches_filter(self, item: T, value: str) -> bool:
        """Whether an item passes the tag/category filter."""
        return getattr(item, "category", None) == value

    def _sort_key(self, item: T) -> Any:
        """Sort key for the derived view; flagged items first."""
        return 0

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def items(self) -> List[T]:
        """Records in stored order."""
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self):
        return iter(list(self._items))

    def __contains__(self, item_id: object) -> bool:
        return self.get(item_id) is not None  # type: ignore[arg-type]

    def get(self, item_id: str) -> Optional[T]:
        """Get a record by its ID."""
        for item in self._items:
            if item.id == item_id:
                return item
        return None

    @property
    def active(self) -> Optional[T]:
        """The selected record, if any."""
        return self.get(self.active_id) if self.active_id else None

    def select(self, item_id: Optional[str]) -> None:
        """Select a record; unknown ids clear the selection."""
        self.active_id = item_id if item_id and self.get(item_id) else None

    def view(self) -> List[T]:
        """
        Records matching the search term and filter, in display order.

        Returns:
            Filtered and sorted list of records
        """
        term = self.search_term.strip().lower()
        filtered = [
            item for item in self._items
            if self._matches_search(item, term)
            and (self.filter_value is None or self._matches_filter(item, self.filter_value))
        ]
        return sorted(filtered, key=self._sort_key)

    def _matches_search(self, item: T, term: str) -> bool:
        if not term:
            return True
        for field_name in self.searchable_fields:
            value = getattr(item, field_name, None)
            if value and term in str(value).lower():
                return True
        return False

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def create(self, **fields: Any) -> T:
        """
        Create a record with a fresh id and make it active.

        Args:
            **fields: Field values, merged over the type defaults

        Returns:
            The created record

        Raises:
            ValidationError: If the merged fields do not form a valid record
        """
        data = self._default_fields()
        data.update({k: v for k, v in fields.items() if k != "id"})
        data["id"] = generate_entity_id(self.id_prefix)

        item = self.entity_model.model_validate(data)
        self._items.insert(0, item)
        self.active_id = item.id
        self._persist()

        logger.info(f"Created {self.entity_model.__name__} {item.id}")
        return item

    def add(self, item: T) -> T:
        """
        Prepend an already-built record and make it active.

        Args:
            item: Record to add

        Returns:
            The stored record
        """
        self._items.insert(0, item)
        self.active_id = item.id
        self._persist()
        return item

    def update(self, item_id: str, **fields: Any) -> Optional[T]:
        """
        Merge fields into a record.

        Unknown ids are ignored. Identity fields cannot be changed.

        Args:
            item_id: ID of the record to update
            **fields: Field values to merge

        Returns:
            The updated record, or None when the id is not found

        Raises:
            ValueError: If a field name is unknown
            ValidationError: If the merged record is invalid
        """
        index = self._index_of(item_id)
        if index is None:
            return None

        unknown = [name for name in fields if name not in self.entity_model.model_fields]
        if unknown:
            raise ValueError(f"Unknown {self.entity_model.__name__} field(s): {', '.join(unknown)}")

        current = self._items[index]
        data = current.model_dump()
        data.update({k: v for k, v in fields.items() if k not in self.immutable_fields})
        if self.touches_updated_at:
            # never earlier than createdAt, even when it comes from a clock ahead of ours
            created_at = getattr(current, "created_at", None)
            now = get_datetime_now()
            data["updated_at"] = max(now, created_at) if created_at is not None else now

        updated = self.entity_model.model_validate(data)
        self._items[index] = updated
        self._persist()
        return updated

    def replace(self, item: T) -> Optional[T]:
        """
        Replace the record carrying ``item.id`` with ``item``.

        Returns:
            The stored record, or None when the id is not found
        """
        index = self._index_of(item.id)
        if index is None:
            return None
        self._items[index] = item
        self._persist()
        return item

    def delete(self, item_id: str) -> bool:
        """
        Remove a record.

        When the active record is removed, the first remaining record becomes
        active (or none when the collection is empty).

        Args:
            item_id: ID of the record to remove

        Returns:
            True if a record was removed
        """
        index = self._index_of(item_id)
        if index is None:
            return False

        del self._items[index]
        if self.active_id == item_id:
            self.active_id = self._items[0].id if self._items else None
        self._persist()

        logger.info(f"Deleted {self.entity_model.__name__} {item_id}")
        return True

    def import_items(self, records: Any) -> List[T]:
        """
        Merge an external collection into this one by id.

        Existing ids are overwritten in place, new ids are appended. The whole
        input is validated first; nothing changes when any record is invalid.

        Args:
            records: Sequence of mappings in the storage shape

        Returns:
            The validated imported records

        Raises:
            ImportFormatError: If the input is not a list of valid records
        """
        incoming = self.validate_import(records)

        for item in incoming:
            index = self._index_of(item.id)
            if index is None:
                self._items.append(item)
            else:
                self._items[index] = item

        if self.active_id is None and self._items:
            self.active_id = self._items[0].id

        self._persist()
        logger.info(f"Imported {len(incoming)} records into '{self.storage_key}'")
        return incoming

    def validate_import(self, records: Any) -> List[T]:
        """
        Validate an import without touching the collection.

        Raises:
            ImportFormatError: If the input is not a list of valid records
        """
        name = self.entity_model.__name__
        if not isinstance(records, list):
            raise ImportFormatError(f"Expected a list of {name} records, got {type(records).__name__}")

        validated: List[T] = []
        for index, record in enumerate(records):
            if not isinstance(record, Mapping):
                raise ImportFormatError(f"{name} record #{index} is not an object")

            missing = [field for field in self.required_import_fields if record.get(field) in (None, "")]
            if missing:
                raise ImportFormatError(f"{name} record #{index} is missing {', '.join(missing)}")

            try:
                validated.append(self.entity_model.model_validate(record))
            except ValidationError as e:
                raise ImportFormatError(f"{name} record #{index} is invalid: {e}") from e

        return validated

    def to_records(self) -> List[Dict[str, Any]]:
        """The whole collection in storage shape."""
        return [item.to_record() for item in self._items]

    def flush(self) -> None:
        """Write this collection to storage now."""
        self.persistence.flush(self.storage_key)

    def _persist(self) -> None:
        self.persistence.save(self.storage_key, self.to_records())

    def _index_of(self, item_id: str) -> Optional[int]:
        for index, item in enumerate(self._items):
            if item.id == item_id:
                return index
        return None
