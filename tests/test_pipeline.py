"""Tests for the batch renumbering pipeline."""

import pytest

from equation_citator.pipeline import CitationPipeline, run_pipeline
from equation_citator.utils.file_utils import safe_json_load


@pytest.fixture
def pipeline(config_file):
    return CitationPipeline(config_file(), log_level="WARNING")


class TestProcessText:

    def test_renumbers_and_updates_citations(self, pipeline, sample_note):
        result = pipeline.process_text(sample_note, path="intro.md")

        assert result.changed
        assert result.equation_mapping == {"1.1": "1.1", "1.2": "1.1.1"}
        assert result.figure_mapping == {"1.1": "1.1.1"}
        assert "a + b = c \\tag{1.1.1}" in result.text
        assert "![[plot.png|fig:1.1.1|300]]" in result.text
        assert result.text.endswith("See $\\ref{eq:1.1}$ and $\\ref{eq:1.1.1}$, plus $\\ref{fig:1.1.1}$.")

        stats = result.stats
        assert stats.path == "intro.md"
        assert stats.equations_numbered == 2
        assert stats.figures_numbered == 1
        assert stats.citations_remapped == 2
        assert stats.citations_rendered == 0
        assert stats.callouts_indexed == 0

    def test_second_pass_is_stable(self, pipeline, sample_note):
        first = pipeline.process_text(sample_note)
        second = pipeline.process_text(first.text)
        assert not second.changed
        assert second.text == first.text

    def test_render_spans(self, config_file, sample_note):
        pipeline = CitationPipeline(config_file("citations:\n  render_spans: true\n"), log_level="WARNING")
        result = pipeline.process_text(sample_note)
        assert result.text.count('class="em-math-citation-container"') == 3
        assert "\\ref{" not in result.text
        assert result.stats.citations_rendered == 3

    def test_disabled_stages_leave_note_alone(self, config_file, sample_note):
        pipeline = CitationPipeline(config_file(
            "equations:\n  enabled: false\nfigures:\n  enabled: false\n"
        ), log_level="WARNING")
        result = pipeline.process_text(sample_note)
        assert not result.changed
        assert result.text == sample_note
        assert result.to_dict()["equation_mapping"] == {}


class TestProcessFile:

    def test_dry_run_does_not_write(self, pipeline, sample_note, tmp_path):
        note = tmp_path / "note.md"
        note.write_text(sample_note, encoding="utf-8")

        stats = pipeline.process_file(note, dry_run=True)
        assert stats.changed
        assert note.read_text(encoding="utf-8") == sample_note

    def test_writes_changes(self, pipeline, sample_note, tmp_path):
        note = tmp_path / "note.md"
        note.write_text(sample_note, encoding="utf-8")

        stats = pipeline.process_file(note)
        assert stats.error is None
        assert "\\tag{1.1.1}" in note.read_text(encoding="utf-8")
        assert pipeline.logger.metrics["docs_changed"] == 1

    def test_undecodable_note_is_reported(self, pipeline, tmp_path):
        note = tmp_path / "bad.md"
        note.write_bytes(b"\xff\xfe\xfa")

        stats = pipeline.process_file(note)
        assert stats.error
        assert pipeline.logger.metrics["docs_failed"] == 1


class TestRun:

    def test_batch_and_report(self, config_file, sample_note, tmp_path):
        vault = tmp_path / "vault"
        (vault / "sub").mkdir(parents=True)
        (vault / "a.md").write_text(sample_note, encoding="utf-8")
        (vault / "b.md").write_text("No math here.", encoding="utf-8")
        (vault / "sub" / "c.md").write_bytes(b"\xff\xfe\xfa")

        stats = run_pipeline(str(vault), config_path=config_file())

        assert stats.total_notes == 3
        assert stats.changed_notes == 1
        assert stats.failed_notes == 1
        assert stats.end_time is not None

        report = safe_json_load(tmp_path / "reports" / "report.json")
        assert report["total_notes"] == 3
        assert report["dry_run"] is False
        assert [n["changed"] for n in report["notes"]] == [True, False, False]

    def test_non_recursive_dry_run(self, pipeline, sample_note, tmp_path):
        vault = tmp_path / "vault"
        (vault / "sub").mkdir(parents=True)
        (vault / "a.md").write_text(sample_note, encoding="utf-8")
        (vault / "sub" / "c.md").write_text(sample_note, encoding="utf-8")

        stats = pipeline.run(str(vault), recursive=False, dry_run=True)

        assert stats.total_notes == 1
        assert stats.changed_notes == 1
        assert (vault / "a.md").read_text(encoding="utf-8") == sample_note


class TestCallouts:

    def test_configured_callouts_are_indexed(self, pipeline):
        md = "# T\n\n> [!thm:2.3] Pythagoras\n> a^2 + b^2 = c^2\n\n> [!note]\n> plain\n\n> [!table:1]\n> | a |"
        stats = pipeline.process_text(md).stats
        assert stats.callouts == ["Theorem 2.3", "Table. 1"]
        assert stats.callouts_indexed == 2
        assert stats.to_dict()["callouts"] == ["Theorem 2.3", "Table. 1"]

    def test_custom_callout_formats(self, config_file):
        pipeline = CitationPipeline(config_file(
            "callouts:\n  - prefix: \"lem:\"\n    format: \"Lemma #\"\n"
        ), log_level="WARNING")
        md = "> [!lem:4]\n> statement\n\n> [!thm:1]\n> ignored"
        assert pipeline.process_text(md).stats.callouts == ["Lemma 4"]


class TestBoxEquation:

    def test_uses_configured_box_settings(self, config_file):
        pipeline = CitationPipeline(config_file(
            "equations:\n  typst_mode: true\n  typst_box_symbol: \"box\"\n"
        ), log_level="WARNING")
        assert pipeline.box_equation("$$ E = mc^2 $$", 0, 5).text == "box(E = mc^2)"

    def test_skip_first_line_setting(self, config_file):
        pipeline = CitationPipeline(config_file(
            "equations:\n  skip_first_line_in_boxed: true\n"
        ), log_level="WARNING")
        md = "$$\n\\begin{align}\nF = ma\n\\end{align}\n$$"
        assert pipeline.box_equation(md, 2).text == "\\begin{align}\n\\boxed{F = ma\n\\end{align}}\n"

    def test_default_settings(self, pipeline):
        assert pipeline.box_equation("$$ p = mv $$", 0, 3).text == "\\boxed{p = mv}"
        assert pipeline.box_equation("no math", 0) is None


def test_run_metrics_summary(config_file, sample_note, tmp_path):
    vault = tmp_path / "vault"
    vault.mkdir()
    (vault / "a.md").write_text(sample_note, encoding="utf-8")
    (vault / "b.md").write_text("> [!def:1]\n> A term.", encoding="utf-8")

    pipeline = CitationPipeline(config_file(), log_level="WARNING")
    pipeline.run(str(vault))
    summary = pipeline.logger.get_summary()

    assert summary["docs_scanned"] == 2
    assert summary["docs_changed"] == 1
    assert summary["docs_unchanged"] == 1
    assert summary["change_rate"] == 0.5
    assert summary["equations_numbered"] == 2
    assert summary["figures_numbered"] == 1
    assert summary["callouts_indexed"] == 1
