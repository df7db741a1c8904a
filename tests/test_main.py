import pytest
from pathlib import Path
from card_importer import config
from card_importer import main as main_module
from card_importer.exceptions import FatalPreconditionError
from card_importer.models import PhaseReport, TransferFailure


class FakeApp:
    result = []
    error = None
    unmount_failures = []

    def __init__(self, **kwargs):
        FakeApp.kwargs = kwargs

    def import_cards(self, **kwargs):
        FakeApp.call = kwargs
        if FakeApp.error:
            raise FakeApp.error
        return FakeApp.result


@pytest.fixture
def fake_app(monkeypatch):
    FakeApp.result = []
    FakeApp.error = None
    monkeypatch.setattr(main_module, "CardImporterApp", FakeApp)
    monkeypatch.setattr(main_module, "setup_logging", lambda *args: None)
    return FakeApp


def test_parse_args_defaults():
    args = main_module.parse_args([])
    assert args.main == config.DEFAULT_MAIN_ROOT
    assert args.bak == config.DEFAULT_BACKUP_ROOT
    assert args.media == config.DEFAULT_MEDIA_ROOT
    assert args.day_break == config.MINIMUM_DAY_BREAK
    assert not args.mock


def test_options_reach_the_app(fake_app, tmp_path):
    main_module.main(["--main", str(tmp_path / "m"), "--bak", str(tmp_path / "b"),
                      "--mock", "--day-break", "600", "--no-sentinel"])

    assert fake_app.kwargs["main_root"] == tmp_path / "m"
    assert fake_app.kwargs["require_sentinels"] is False
    assert fake_app.call["mock"] is True
    assert fake_app.call["minimum_day_break"] == 600


def test_fatal_error_exits_1(fake_app):
    fake_app.error = FatalPreconditionError("No cards found")
    with pytest.raises(SystemExit) as exc:
        main_module.main([])
    assert exc.value.code == 1


def test_transfer_failures_exit_2(fake_app):
    report = PhaseReport(title="Copy", base_path=Path("/pics"))
    report.failures.append(TransferFailure(Path("/a"), Path("/b"), "boom"))
    fake_app.result = [report]

    with pytest.raises(SystemExit) as exc:
        main_module.main([])
    assert exc.value.code == 2


def test_clean_run_writes_csv(fake_app, tmp_path):
    report = PhaseReport(title="Copy", base_path=Path("/pics"))
    report.claim(Path("/pics/2024-01-01"))
    fake_app.result = [report]
    out = tmp_path / "r.csv"

    main_module.main(["--report-csv", str(out)])

    assert out.exists()


def test_unexpected_error_exits_1(fake_app, caplog):
    fake_app.error = PermissionError("read-only filesystem")
    with pytest.raises(SystemExit) as exc:
        main_module.main([])
    assert exc.value.code == 1
    assert "Fatal error during import." in caplog.text


def test_mock_run_writes_no_log_file(tmp_path):
    main_module.setup_logging(tmp_path, verbose=False, mock=True)
    assert not (tmp_path / config.LOG_FILENAME).exists()
