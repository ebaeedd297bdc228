"""Repository for Property model"""
from typing import Dict, Any, List, Optional
from models.property import Property
from repositories.base_repository import BaseRepository


class PropertyRepository(BaseRepository[Property]):
    """Repository for managing properties"""

    def __init__(self):
        super().__init__('properties')

    def to_model(self, data: Dict[str, Any]) -> Property:
        """Convert Firestore document to Property model"""
        return Property.from_dict(data)

    def to_dict(self, model: Property) -> Dict[str, Any]:
        """Convert Property model to Firestore document"""
        return model.to_dict()

    def create_property(self, property_model: Property) -> Property:
        """
        Create a new property under an auto-generated document ID

        Args:
            property_model: Property model instance

        Returns:
            Created Property model with `id` set
        """
        return self.add(property_model)

    def get_property(self, property_id: str) -> Optional[Property]:
        """
        Get property by ID

        Args:
            property_id: Property document ID

        Returns:
            Property model or None
        """
        return self.get(property_id)

    def get_all_properties(self) -> List[Property]:
        """Get all properties, newest first"""
        return sorted(self.list_all(), key=lambda p: p.createdAt, reverse=True)

    def get_properties_by_status(self, status: str) -> List[Property]:
        """
        Get properties by status, newest first

        Args:
            status: Property status

        Returns:
            List of Property models
        """
        return sorted(self.query('status', '==', status), key=lambda p: p.createdAt, reverse=True)

    def get_next_index(self) -> int:
        """Return one more than the highest propertyIndex in the collection"""
        indexes = [p.propertyIndex for p in self.list_all() if p.propertyIndex is not None]
        return max(indexes, default=0) + 1

    def update_property(self, property_id: str, property_model: Property) -> Property:
        """
        Update an existing property

        Args:
            property_id: Property document ID
            property_model: Updated Property model

        Returns:
            Updated Property model
        """
        return self.update(property_id, property_model)

    def delete_property(self, property_id: str) -> bool:
        """
        Delete a property

        Args:
            property_id: Property document ID

        Returns:
            True if deleted
        """
        return self.delete(property_id)

    def search_properties(self, filters: Dict[str, Any]) -> List[Property]:
        """
        Filter active listings in memory.

        Supported filters: keyword, type, propertyType, minPrice, maxPrice,
        beds (exact number or "4+"), location, city.
        """
        # Narrow down the initial fetch
        if filters.get("status"):
            initial_results = self.query("status", "==", filters["status"])
        else:
            initial_results = self.list_all()

        matches = []

        for prop in initial_results:
            # --- A. Keyword Search (Token-Based) ---
            if filters.get("keyword"):
                # "Satellite, Ahmedabad" -> ["satellite", "ahmedabad"]
                search_tokens = filters["keyword"].lower().replace(",", " ").split()

                searchable_text = " ".join([
                    prop.titleLower or prop.title.lower(),
                    prop.description.lower(),
                    prop.locationLower or prop.location.lower(),
                    " ".join(prop.amenities).lower(),
                    " ".join(prop.features).lower(),
                ])

                # Every token must be present somewhere in the listing text
                if not all(token in searchable_text for token in search_tokens):
                    continue

            # --- B. Exact Matches (Enums) ---
            if filters.get("type") and filters["type"] != "all" and prop.type.lower() != filters["type"].lower():
                continue
            if filters.get("propertyType") and filters["propertyType"] != "all" and prop.propertyType != filters["propertyType"]:
                continue

            # --- C. Numeric Ranges ---
            if filters.get("minPrice") is not None and prop.price < float(filters["minPrice"]):
                continue
            if filters.get("maxPrice") is not None and prop.price > float(filters["maxPrice"]):
                continue

            beds = filters.get("beds")
            if beds and beds != "all":
                if beds == "4+":
                    if prop.beds < 4:
                        continue
                elif prop.beds != int(beds):
                    continue

            # --- D. Substring Matches ---
            if filters.get("location") and filters["location"].lower() not in (prop.locationLower or prop.location.lower()):
                continue
            if filters.get("city") and filters["city"].lower() not in (prop.locationLower or prop.location.lower()):
                continue

            matches.append(prop)

        matches.sort(key=lambda p: p.createdAt, reverse=True)
        return matches
