import json
from pathlib import Path

import pytest

from sc_flow.config import load_global_config, sample_source_for
from sc_flow.core.exceptions import ConfigError


def _make_config_dir(tmp_path: Path, global_raw=None, samples=None) -> Path:
    # root/
    #   global.json
    #   samples/
    #     sample_1.json ...
    root = tmp_path / "config"
    (root / "samples").mkdir(parents=True)
    (root / "global.json").write_text(json.dumps(global_raw or {}))
    for i, raw in enumerate(samples or [], start=1):
        (root / "samples" / f"sample_{i}.json").write_text(json.dumps(raw))
    return root


def test_defaults_from_empty_global(tmp_path):
    root = _make_config_dir(tmp_path)

    cfg = load_global_config(root)

    assert cfg.ui_title == "Single-Cell Flow Browser"
    assert cfg.n_bins == 10
    assert cfg.fold_change_epsilon == 0.0001
    assert cfg.peak_threshold is None
    assert cfg.drawing_pad.domain == (1.0, 10000.0)
    assert cfg.drawing_pad.level_range == (0.0, 175.0)
    assert cfg.plot.height == 500.0
    assert cfg.samples == []
    assert cfg.data_root is None


def test_samples_are_read_in_file_order_and_data_root_resolved(tmp_path):
    root = _make_config_dir(
        tmp_path,
        global_raw={"n_bins": 6, "fold_change_epsilon": 0.5, "peak_threshold": 3, "data_root": "../data"},
        samples=[
            {"name": "193_4cell", "file": "193_4cell_RPKM.txt"},
            {"name": "194_4cell", "file": "194_4cell_RPKM.txt"},
        ],
    )

    cfg = load_global_config(root)

    assert [s.name for s in cfg.samples] == ["193_4cell", "194_4cell"]
    assert cfg.samples[0].path == Path("193_4cell_RPKM.txt")
    assert cfg.n_bins == 6
    assert cfg.fold_change_epsilon == 0.5
    assert cfg.peak_threshold == 3.0
    assert cfg.data_root == (tmp_path / "data").resolve()


def test_sample_source_resolves_against_data_root(tmp_path, monkeypatch):
    monkeypatch.delenv("SC_FLOW_DATA_ROOT", raising=False)
    root = _make_config_dir(
        tmp_path,
        global_raw={"data_root": "../data"},
        samples=[{"name": "s1", "file": "s1.txt"}],
    )

    source = sample_source_for(load_global_config(root), root)

    assert source.resolve("s1") == (tmp_path / "data").resolve() / "s1.txt"


def test_sample_source_defaults_to_config_root(tmp_path, monkeypatch):
    monkeypatch.delenv("SC_FLOW_DATA_ROOT", raising=False)
    root = _make_config_dir(tmp_path, samples=[{"name": "s1", "file": "s1.txt"}])

    source = sample_source_for(load_global_config(root), root)

    assert source.resolve("s1") == root / "s1.txt"


def test_missing_global_json_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_global_config(tmp_path)


@pytest.mark.parametrize(
    "global_raw",
    [
        {"n_bins": 1},
        {"fold_change_epsilon": 0},
        {"drawing_pad": {"domain": [0, 100]}},
        {"drawing_pad": {"height": 20, "margin": 25}},
    ],
)
def test_invalid_global_values_raise(tmp_path, global_raw):
    root = _make_config_dir(tmp_path, global_raw=global_raw)
    with pytest.raises(ConfigError):
        load_global_config(root)


def test_sample_without_file_raises(tmp_path):
    root = _make_config_dir(tmp_path, samples=[{"name": "s1"}])
    with pytest.raises(ConfigError):
        load_global_config(root)


def test_duplicate_sample_names_raise(tmp_path):
    root = _make_config_dir(
        tmp_path,
        samples=[{"name": "s1", "file": "a.txt"}, {"name": "s1", "file": "b.txt"}],
    )
    with pytest.raises(ConfigError):
        load_global_config(root)


def test_shipped_config_is_valid():
    root = Path(__file__).resolve().parents[3] / "config"

    cfg = load_global_config(root)

    assert len(cfg.samples) == 4
    for sample in cfg.samples:
        assert (cfg.data_root / sample.path).is_file()


def test_plot_geometry_is_read(tmp_path):
    root = _make_config_dir(tmp_path, global_raw={"plot": {"height": 300, "padding": 20}})

    cfg = load_global_config(root)

    assert (cfg.plot.height, cfg.plot.padding) == (300.0, 20.0)
