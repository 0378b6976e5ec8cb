import io
import json
import logging

from scripts.ghdisco.logging_config import configure_logging


def test_json_line_with_extra_fields():
    stream = io.StringIO()
    configure_logging("debug", stream=stream)
    logging.getLogger("ghdisco.provider").debug(
        "Fetched page",
        extra={"provider": "github", "query": "user_roles", "page": 2, "records": 100},
    )

    entry = json.loads(stream.getvalue().splitlines()[-1])
    assert entry["level"] == "DEBUG"
    assert entry["logger"] == "ghdisco.provider"
    assert entry["message"] == "Fetched page"
    assert entry["provider"] == "github"
    assert entry["page"] == 2
    assert entry["records"] == 100


def test_unknown_level_starts_at_default():
    configure_logging("verbose", stream=io.StringIO())
    assert logging.getLogger("ghdisco").level == logging.WARNING


def test_default_level_hides_info():
    stream = io.StringIO()
    configure_logging(stream=stream)
    logging.getLogger("ghdisco.github").info("Listed user roles")
    assert stream.getvalue() == ""
