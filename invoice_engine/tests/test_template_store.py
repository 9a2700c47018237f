import pytest
from pydantic import ValidationError

from invoice_engine.app.services.template_store import (
    InMemoryTemplateStore,
    TemplateRecord,
)


def _record(template_id="facture-std", user_id="user-1", **overrides):
    fields = {
        "user_id": user_id,
        "template_id": template_id,
        "name": "Facture standard",
        "preset": "classique",
    }
    fields.update(overrides)
    return TemplateRecord(**fields)


def test_save_and_get():
    store = InMemoryTemplateStore()

    saved = store.save(_record())

    assert saved.updated_at is not None
    assert store.get("user-1", "facture-std") == saved
    assert store.get("user-2", "facture-std") is None


def test_save_overwrites_last_write_wins():
    store = InMemoryTemplateStore()
    store.save(_record(name="Première version"))

    store.save(_record(name="Seconde version", preset="tech"))

    record = store.get("user-1", "facture-std")
    assert record.name == "Seconde version"
    assert record.preset == "tech"
    assert len(store.list_for_user("user-1")) == 1


def test_only_one_default_per_user():
    store = InMemoryTemplateStore()
    store.save(_record("a", is_default=True))
    store.save(_record("b", is_default=True))
    store.save(_record("c", user_id="user-2", is_default=True))

    assert store.get_default("user-1").template_id == "b"
    assert store.get("user-1", "a").is_default is False
    assert store.get_default("user-2").template_id == "c"


def test_user_without_default():
    store = InMemoryTemplateStore()
    store.save(_record())

    assert store.get_default("user-1") is None


def test_list_for_user_is_sorted_and_scoped():
    store = InMemoryTemplateStore()
    for template_id in ("zeta", "alpha", "mu"):
        store.save(_record(template_id))
    store.save(_record("other", user_id="user-2"))

    ids = [r.template_id for r in store.list_for_user("user-1")]

    assert ids == ["alpha", "mu", "zeta"]


def test_delete():
    store = InMemoryTemplateStore()
    store.save(_record())

    assert store.delete("user-1", "facture-std") is True
    assert store.delete("user-1", "facture-std") is False
    assert store.get("user-1", "facture-std") is None


def test_configuration_keys_are_canonicalized():
    record = _record(
        configuration={
            "colors": {"primary": "#123456"},
            "sections": {"showLogo": False},
            "customText": {"invoiceTitle": "NOTE"},
            "unknownKey": 1,
        }
    )

    assert record.configuration == {
        "colors": {"primary": "#123456"},
        "sections": {"logo": False},
        "custom_text": {"invoice_title": "NOTE"},
    }


def test_unknown_preset_is_rejected():
    with pytest.raises(ValidationError):
        _record(preset="n-existe-pas")


def test_records_are_immutable():
    record = _record()

    with pytest.raises(ValidationError):
        record.name = "Autre"
