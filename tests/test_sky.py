import json

import pytest

from helpers import NOISE_4, PALETTE_16, resource
from skytool.sink import MANIFEST_NAME
from skytool.sky import main


def test_main_extracts(make_archive, tmp_path):
    d = make_archive([resource(PALETTE_16), resource(NOISE_4), resource(b"")])
    out = tmp_path / "out"
    assert main([str(d), "--dump-csv", "-o", str(out)]) == 0
    assert (out / "0000_palette.pal").exists()
    assert (out / MANIFEST_NAME).exists()


def test_main_without_csv(make_archive, tmp_path):
    d = make_archive([resource(NOISE_4)])
    out = tmp_path / "out"
    assert main([str(d), "-o", str(out), "-j", "2"]) == 0
    assert not (out / MANIFEST_NAME).exists()


def test_main_reports_missing_archive(tmp_path, caplog):
    assert main([str(tmp_path / "missing"), "-o", str(tmp_path / "out")]) == 1
    assert str(tmp_path / "missing") in caplog.text
    assert not (tmp_path / "out").exists()


def test_main_config(make_archive, tmp_path):
    d = make_archive([resource(NOISE_4 * 3)])
    cfg = tmp_path / "thresholds.json"
    cfg.write_text(json.dumps({"palette_min_entries": 4}))
    out = tmp_path / "out"
    assert main([str(d), "-o", str(out), "--config", str(cfg)]) == 0
    assert (out / "0000_palette.pal").exists()


def test_main_bad_config(make_archive, tmp_path):
    d = make_archive([resource(NOISE_4)])
    cfg = tmp_path / "thresholds.json"
    cfg.write_text(json.dumps({"nonsense": 1}))
    assert main([str(d), "--config", str(cfg), "-o", str(tmp_path / "out")]) == 2


def test_main_rejects_bad_jobs():
    with pytest.raises(SystemExit) as e:
        main(["somewhere", "-j", "0"])
    assert e.value.code == 2


@pytest.mark.parametrize("overrides", [
    {"palette_min_entries": "16"},
    {"screen_sizes": [[320]]},
])
def test_main_bad_config_value(make_archive, tmp_path, overrides):
    d = make_archive([resource(NOISE_4)])
    cfg = tmp_path / "thresholds.json"
    cfg.write_text(json.dumps(overrides))
    out = tmp_path / "out"
    assert main([str(d), "--config", str(cfg), "-o", str(out)]) == 2
    assert not out.exists()
