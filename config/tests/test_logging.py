import json
import logging
import sys

from config.logging import JsonFormatter, SamplingFilter


def _record(msg="inventory.transfer_recorded", level=logging.INFO, **extra):
    record = logging.LogRecord("fieldstock.inventory", level, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_merges_extra_fields():
    record = _record(event="inventory.transfer_recorded", item_id=4, transaction_ids=[1, 2], user=object())

    payload = json.loads(JsonFormatter().format(record))

    assert payload["level"] == "INFO"
    assert payload["name"] == "fieldstock.inventory"
    assert payload["message"] == "inventory.transfer_recorded"
    assert payload["event"] == "inventory.transfer_recorded"
    assert payload["item_id"] == 4
    assert payload["transaction_ids"] == [1, 2]
    # Non-serializable values are stringified rather than dropped
    assert isinstance(payload["user"], str)
    assert payload["time"].endswith("Z")
    assert "msg" not in payload


def test_json_formatter_renders_exceptions():
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        record = logging.LogRecord("fieldstock", logging.ERROR, __file__, 1, "failed", None, sys.exc_info())

    payload = json.loads(JsonFormatter().format(record))

    assert "RuntimeError: boom" in payload["exc"]


def test_sampling_filter_keeps_allowed_prefixes():
    f = SamplingFilter(rate=0.0, levels=["INFO"], allow_prefixes=["inventory."])

    assert f.filter(_record(event="inventory.audit_submitted")) is True
    assert f.filter(_record(msg="django.request.chatter")) is False


def test_sampling_filter_only_applies_to_configured_levels():
    f = SamplingFilter(rate=0.0, levels=["INFO"])

    assert f.filter(_record(msg="inventory.write_conflict", level=logging.WARNING)) is True
    assert f.filter(_record(msg="noise", level=logging.INFO)) is False


def test_sampling_filter_full_rate_and_bad_rate():
    assert SamplingFilter(rate=1.0).filter(_record(msg="noise")) is True
    # An unparsable rate keeps everything
    assert SamplingFilter(rate="often").filter(_record(msg="noise")) is True
