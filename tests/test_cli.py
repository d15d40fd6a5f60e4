import json

from maplealerts.cli import alerts as cli
from maplealerts.models import Alert
from maplealerts.service import CrawlReport


def _fake_run(report):
    async def run(args):
        return report

    return run


def test_cli_json_output_and_payload(monkeypatch, tmp_path, capsys):
    report = CrawlReport(
        alerts=[Alert(id="A1", title="yellow warning - wind", severity="Moderate", ec_color="YELLOW")],
        province="bc",
        office="CWVR",
        date="20261018",
    )
    monkeypatch.setattr(cli, "_run", _fake_run(report))
    out = tmp_path / "alerts.json"

    rc = cli.main(["--province", "BC", "--location", "Prince Rupert", "--json", "--out", str(out)])

    assert rc == 0
    printed = capsys.readouterr().out
    start = printed.index("[")
    assert json.loads(printed[start:])[0]["id"] == "A1"
    assert json.loads(out.read_text(encoding="utf-8"))["location"] == "Prince Rupert"


def test_cli_text_output_sorted_by_severity(monkeypatch, capsys):
    report = CrawlReport(
        alerts=[
            Alert(id="S", title="special weather statement", severity="Minor"),
            Alert(id="T", title="red warning - tornado", severity="Severe", ec_color="RED", alert_type="WARNING"),
        ],
        province="on",
        office="CWTO",
    )
    monkeypatch.setattr(cli, "_run", _fake_run(report))

    assert cli.main(["--province", "ON", "--report"]) == 0
    text = capsys.readouterr().out
    assert text.index("red warning - tornado") < text.index("special weather statement")
    assert "office=CWTO" in text


def test_cli_no_alerts(monkeypatch, capsys):
    monkeypatch.setattr(cli, "_run", _fake_run(CrawlReport()))
    assert cli.main(["--province", "QC"]) == 0
    assert "No active weather alerts." in capsys.readouterr().out
