"""Tests for the Category aggregate."""

import pytest
from agrimarket.catalogue.category import Category, CategoryStatus
from agrimarket.catalogue.events import CategoryCreated, CategoryUpdated
from protean.exceptions import ValidationError


class TestCategoryCreation:
    def test_create_sets_fields(self):
        category = Category.create(name="Fruits", description="Seasonal fruit")
        assert category.name == "Fruits"
        assert category.description == "Seasonal fruit"
        assert category.image is None

    def test_create_defaults_to_active(self):
        category = Category.create(name="Fruits", description="Seasonal fruit")
        assert category.status == CategoryStatus.ACTIVE.value

    def test_create_with_inactive_status(self):
        category = Category.create(name="Fruits", description="Seasonal fruit", status="inactive")
        assert category.status == CategoryStatus.INACTIVE.value

    def test_create_sets_timestamps(self):
        category = Category.create(name="Fruits", description="Seasonal fruit")
        assert category.created_at is not None
        assert category.updated_at is not None

    def test_create_raises_event(self):
        category = Category.create(name="Fruits", description="Seasonal fruit")
        event = category._events[-1]
        assert isinstance(event, CategoryCreated)
        assert event.name == "Fruits"

    @pytest.mark.parametrize("name,description", [(None, "Seasonal fruit"), ("Fruits", None), ("", "")])
    def test_name_and_description_are_required(self, name, description):
        with pytest.raises(ValidationError) as exc:
            Category.create(name=name, description=description)
        assert "Please provide category name and description" in exc.value.messages["category"]

    def test_unknown_status_is_rejected(self):
        with pytest.raises(ValidationError):
            Category.create(name="Fruits", description="Seasonal fruit", status="archived")


class TestCategoryUpdate:
    def test_update_changes_only_given_fields(self):
        category = Category.create(name="Fruits", description="Seasonal fruit")
        category.update_details(name="Fresh Fruits")
        assert category.name == "Fresh Fruits"
        assert category.description == "Seasonal fruit"

    def test_update_status(self):
        category = Category.create(name="Fruits", description="Seasonal fruit")
        category.update_details(status="inactive")
        assert category.status == "inactive"

    def test_update_raises_event(self):
        category = Category.create(name="Fruits", description="Seasonal fruit")
        category._events.clear()
        category.update_details(image="https://cdn.example.com/fruits.jpg")
        assert isinstance(category._events[-1], CategoryUpdated)
