import logging

import pytest

from invoice_engine.app.legal.presets import LEGAL_MENTIONS_PRESETS
from invoice_engine.app.normalization.normalize import (
    merge_configuration,
    normalize_configuration,
)
from invoice_engine.app.registry.presets import TEMPLATE_PRESETS
from invoice_engine.app.schemas.template_config import (
    DEFAULT_LEGAL_MENTIONS,
    HeaderStyle,
    LogoSize,
    SectionKey,
    TemplateConfiguration,
)


PARTIAL_CONFIGURATIONS = [
    None,
    {},
    {"colors": {"primary": "#FF0000"}},
    {"fonts": {"size": {"base": 12}}},
    {"sections": {"showBankDetails": False, "itemDetails": True}},
    {"customText": {"invoiceTitle": "NOTE D'HONORAIRES", "footerText": "  "}},
    {"layout": {"logoSize": "large", "borderRadius": 99}},
    {"colors": "red", "fonts": {"heading": ""}},
]


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

def test_empty_configuration_gets_documented_defaults():
    config = normalize_configuration(None)

    assert config.colors.primary == "#2c5aa0"
    assert config.colors.secondary == "#666666"
    assert config.colors.accent == "#059669"
    assert config.colors.text == "#333333"
    assert config.colors.background == "#ffffff"

    assert config.fonts.heading == "Helvetica-Bold"
    assert config.fonts.body == "Helvetica"
    assert (config.fonts.sizes.base, config.fonts.sizes.heading, config.fonts.sizes.small) == (10, 20, 8)

    assert config.layout.logo_size == LogoSize.MEDIUM
    assert config.layout.header_style == HeaderStyle.MODERN
    assert config.layout.border_radius == 4

    for key in SectionKey:
        expected = key != SectionKey.ITEM_DETAILS
        assert config.sections.is_visible(key) is expected

    assert config.custom_text.invoice_title == "FACTURE"
    assert config.custom_text.payment_terms_label == "Modalités de paiement"
    assert config.custom_text.bank_details_label == "Coordonnées Bancaires"
    assert config.custom_text.legal_mentions == DEFAULT_LEGAL_MENTIONS
    assert config.custom_text.legal_mentions_preset_id == "societe-standard"
    assert config.custom_text.footer_text is None


# ---------------------------------------------------------------------------
# Idempotence
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("raw", PARTIAL_CONFIGURATIONS)
def test_normalize_is_idempotent(raw):
    once = normalize_configuration(raw)

    assert normalize_configuration(once) == once
    assert normalize_configuration(once.model_dump()) == once
    assert normalize_configuration(once.model_dump(by_alias=True)) == once
    assert normalize_configuration(once.model_dump(mode="json")) == once


@pytest.mark.parametrize("preset", list(TEMPLATE_PRESETS.values()), ids=lambda p: p.slug)
def test_presets_are_normalization_fixed_points(preset):
    assert normalize_configuration(preset.configuration.model_dump()) == preset.configuration


# ---------------------------------------------------------------------------
# Key spellings
# ---------------------------------------------------------------------------

def test_camel_case_and_legacy_keys_are_accepted():
    config = normalize_configuration(
        {
            "colors": {"primary": "#123ABC"},
            "fonts": {"size": {"base": 12, "heading": 24}},
            "layout": {"logoPosition": "center", "headerStyle": "classic"},
            "sections": {
                "showLogo": False,
                "show_bank_details": False,
                "itemDetails": True,
            },
            "customText": {
                "invoiceTitle": "NOTE D'HONORAIRES",
                "legalMentionsType": "profession-liberale",
            },
        }
    )

    assert config.colors.primary == "#123abc"
    assert config.fonts.sizes.base == 12
    assert config.fonts.sizes.heading == 24
    assert config.layout.logo_position.value == "center"
    assert config.sections.logo is False
    assert config.sections.bank_details is False
    assert config.sections.item_details is True
    assert config.custom_text.invoice_title == "NOTE D'HONORAIRES"
    assert config.custom_text.legal_mentions_preset_id == "profession-liberale"


def test_snake_case_wins_over_alias_of_same_field():
    config = normalize_configuration(
        {"sections": {"showLogo": True, "logo": False}}
    )

    assert config.sections.logo is False


def test_unknown_keys_are_ignored():
    config = normalize_configuration(
        {"colors": {"primary": "#000000", "shadow": "#111111"}, "theme": "dark"}
    )

    assert config.colors.primary == "#000000"


# ---------------------------------------------------------------------------
# Invalid leaves
# ---------------------------------------------------------------------------

def test_invalid_leaves_fall_back_to_their_default(caplog):
    with caplog.at_level(logging.WARNING, logger="invoice_engine.app.normalization.normalize"):
        config = normalize_configuration(
            {
                "colors": {"primary": "blue", "accent": "#00ff00"},
                "fonts": {"sizes": {"base": 99, "small": 6}},
                "layout": {"logoSize": "gigantic", "borderRadius": "round"},
                "customText": {"legalMentionsPresetId": "unknown-preset"},
            }
        )

    defaults = TemplateConfiguration()

    assert config.colors.primary == defaults.colors.primary
    assert config.colors.accent == "#00ff00"
    assert config.fonts.sizes.base == defaults.fonts.sizes.base
    assert config.fonts.sizes.small == 6
    assert config.layout.logo_size == defaults.layout.logo_size
    assert config.layout.border_radius == defaults.layout.border_radius
    assert config.custom_text.legal_mentions_preset_id == "societe-standard"

    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) >= 5


def test_non_mapping_sub_configuration_uses_defaults():
    config = normalize_configuration({"colors": ["#000000"], "sections": None})

    assert config.colors == TemplateConfiguration().colors
    assert config.sections == TemplateConfiguration().sections


def test_non_mapping_configuration_never_raises():
    assert normalize_configuration("not a configuration") == TemplateConfiguration()


def test_blank_footer_becomes_none():
    config = normalize_configuration({"customText": {"footerText": "   "}})

    assert config.custom_text.footer_text is None


def test_built_configuration_is_returned_as_is():
    config = TemplateConfiguration()

    assert normalize_configuration(config) is config


# ---------------------------------------------------------------------------
# Merge
# ---------------------------------------------------------------------------

def test_merge_overrides_preset_values_deeply():
    preset = TEMPLATE_PRESETS["classique"].configuration

    merged = normalize_configuration(
        merge_configuration(
            preset,
            {"colors": {"primary": "#000000"}, "sections": {"showLogo": False}},
        )
    )

    assert merged.colors.primary == "#000000"
    assert merged.colors.accent == preset.colors.accent
    assert merged.sections.logo is False
    assert merged.sections.bank_details == preset.sections.bank_details
    assert merged.custom_text.legal_mentions_preset_id == "societe-complete"


def test_merge_ignores_none_overrides():
    preset = TEMPLATE_PRESETS["moderne"].configuration

    merged = normalize_configuration(
        merge_configuration(preset, {"customText": {"footerText": None}, "colors": None})
    )

    assert merged == preset


def test_preset_legal_texts_come_from_legal_presets():
    for preset in TEMPLATE_PRESETS.values():
        legal = LEGAL_MENTIONS_PRESETS[preset.configuration.custom_text.legal_mentions_preset_id]
        assert preset.configuration.custom_text.legal_mentions == legal.template
