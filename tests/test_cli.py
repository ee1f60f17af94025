from __future__ import annotations

from pathlib import Path

import pytest

from fx_lira import DatabaseConnectionInfo, FxLira, cli
from fx_lira.exceptions import ProviderUnavailable
from fx_lira.ingestion.models import RateQuote


class _Provider:
    name = "static"

    def __init__(self, quotes: list[RateQuote] | None) -> None:
        self.quotes = quotes

    def fetch_quotes(self) -> list[RateQuote]:
        if self.quotes is None:
            raise ProviderUnavailable(self.name, "offline")
        return list(self.quotes)


def _patch_facade(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, quotes: list[RateQuote] | None
) -> None:
    def factory(db_url: str | None, evds_key: str | None = None) -> FxLira:
        return FxLira(
            DatabaseConnectionInfo.sqlite(tmp_path / "cli.db"), providers=[_Provider(quotes)]
        )

    monkeypatch.setattr(cli, "FxLira", factory)


def test_parse_args_accumulate() -> None:
    args = cli.parse_args(["--db", "sqlite:///x.db", "accumulate", "100", "2.5", "7", "--save"])

    assert args.db_url == "sqlite:///x.db"
    assert (args.principal, args.rate, args.days, args.save) == (100.0, 2.5, 7, True)


def test_accumulate_prints_turkish_totals(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    db = f"sqlite:///{tmp_path / 'history.db'}"

    assert cli.main(["--db", db, "accumulate", "10000", "5", "30", "--save"]) == 0
    out = capsys.readouterr().out
    assert "Genel Toplam: 43.219,42 TL" in out
    assert "Kırk Üç Bin İki Yüz On Dokuz TL Kırk İki Kuruş" in out
    assert "Toplam Kâr:   33.219,42 TL" in out
    assert "Toplam Artış: %332,19" in out
    assert "Kaydedildi" in out

    assert cli.main(["--db", db, "history"]) == 0
    history = capsys.readouterr().out
    assert "10000.0 × %5.0 × 30 gün" in history


def test_rates_lists_quotes(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    _patch_facade(
        monkeypatch,
        tmp_path,
        [RateQuote("USD", "Amerikan Doları", 34.0, 34.2), RateQuote("XAU", "Altın", 2400, 2410)],
    )

    assert cli.main(["rates", "--metals"]) == 0
    out = capsys.readouterr().out
    assert "XAU" in out
    assert "USD" not in out


def test_rates_reports_exhausted_providers(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    _patch_facade(monkeypatch, tmp_path, None)

    assert cli.main(["rates"]) == 1
    assert "Kurlar yüklenemedi" in capsys.readouterr().err


def test_metals_flag_without_metal_instruments_explains_itself(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    _patch_facade(monkeypatch, tmp_path, [RateQuote("USD", "Amerikan Doları", 34.0, 34.2)])

    assert cli.main(["rates", "--metals"]) == 1
    assert "Değerli maden kuru tanımlı değil." in capsys.readouterr().err


def test_metals_help_names_required_instruments(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit):
        cli.parse_args(["rates", "--help"])

    assert "XAU/XAG/XPT/XPD" in capsys.readouterr().out
