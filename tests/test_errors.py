from __future__ import annotations

from distclean.exceptions import (
    ConfigValidationError,
    DistCleanError,
    ProductCleanError,
    RemovalError,
    ScanError,
    describe_error,
)


def test_errors_carry_code_and_context() -> None:
    err = ConfigValidationError("bad config", context={"path": "distclean.yml"})
    assert isinstance(err, DistCleanError)
    assert err.code == "config_validation_error"
    assert err.context == {"path": "distclean.yml"}
    assert str(err) == "bad config"


def test_path_errors_record_path() -> None:
    assert RemovalError("failed to remove file /out/app", path="/out/app").context == {"path": "/out/app"}
    assert ScanError("failed to read directory /out/1.0", path="/out/1.0").code == "directory_scan_error"


def test_describe_error_follows_causes() -> None:
    try:
        try:
            raise RemovalError("failed to remove file /out/app", path="/out/app")
        except RemovalError as exc:
            raise ProductCleanError("app") from exc
    except ProductCleanError as wrapped:
        assert describe_error(wrapped) == "failed to clean app: failed to remove file /out/app"
