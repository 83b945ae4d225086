import copy
import dataclasses

import pytest

from policygen.models.resource import UNKNOWN, Resource, Source, Unknown


class TestResource:
    def _bucket(self, **kwargs):
        fields = dict(
            resource_type="google_storage_bucket",
            name="logs",
            source=Source.STATE,
            attributes={"location": "US", "labels": {"team": "sec"}},
        )
        fields.update(kwargs)
        return Resource(**fields)

    @pytest.mark.parametrize("field", ["resource_type", "name"])
    def test_empty_identity_rejected(self, field):
        with pytest.raises(ValueError):
            self._bucket(**{field: ""})

    def test_frozen(self):
        r = self._bucket()
        with pytest.raises(dataclasses.FrozenInstanceError):
            r.name = "other"

    def test_attributes_read_only(self):
        r = self._bucket()
        with pytest.raises(TypeError):
            r.attributes["location"] = "EU"

    def test_nested_attributes_read_only(self):
        r = self._bucket(attributes={"labels": {"team": "sec"}, "ports": ["22"]})
        with pytest.raises(TypeError):
            r.attributes["labels"]["team"] = "mutated"
        with pytest.raises(AttributeError):
            r.attributes["ports"].append("443")
        assert r.attributes["labels"]["team"] == "sec"
        assert r.attributes["ports"] == ("22",)

    def test_nested_attributes_detached_from_input(self):
        labels = {"team": "sec"}
        r = self._bucket(attributes={"labels": labels})
        labels["team"] = "mutated"
        assert r.attributes["labels"]["team"] == "sec"

    def test_hashable(self):
        assert hash(self._bucket()) == hash(self._bucket())
        assert len({self._bucket(), self._bucket(), self._bucket(name="other")}) == 2

    def test_attributes_detached_from_input(self):
        attrs = {"location": "US"}
        r = self._bucket(attributes=attrs)
        attrs["location"] = "EU"
        assert r.attributes["location"] == "US"

    def test_qualified_name(self):
        assert self._bucket().qualified_name == "google_storage_bucket.logs"
        assert self._bucket(address="module.a.google_storage_bucket.logs").qualified_name == \
            "module.a.google_storage_bucket.logs"

    def test_provenance_distinguishes_equal_attributes(self):
        assert self._bucket() != self._bucket(source=Source.PLAN)

    def test_to_dict(self):
        r = self._bucket(source=Source.PLAN, attributes={"id": UNKNOWN, "tags": [UNKNOWN, "a"]})
        assert r.to_dict() == {
            "address": "google_storage_bucket.logs",
            "type": "google_storage_bucket",
            "name": "logs",
            "source": "plan",
            "provider_name": "",
            "attributes": {"id": "(known after apply)", "tags": ["(known after apply)", "a"]},
        }


class TestUnknown:
    def test_singleton(self):
        assert Unknown() is UNKNOWN

    def test_survives_copy(self):
        assert copy.deepcopy({"id": UNKNOWN})["id"] is UNKNOWN
        assert copy.copy(UNKNOWN) is UNKNOWN

    def test_not_equal_to_values(self):
        assert UNKNOWN != ""
        assert UNKNOWN != None  # noqa: E711
