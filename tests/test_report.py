# ABOUTME: Unit tests for text reports and report file generation
import json
import tempfile
from pathlib import Path

import pandas as pd
import pytest

from keyheat.heatmap import Layout, LayoutKey, compose_layouts
from keyheat.report import ReportGenerator, format_bigram_report, format_frequency_report
from keyheat.session import AnalysisSession, AnalyzeLog, dispatch


@pytest.fixture
def session():
    layout = Layout("mini", (LayoutKey("a", 30, 70), LayoutKey("<", 75, 70)))
    return dispatch(AnalysisSession(layouts=(layout,)), AnalyzeLog("a a b\na")).session


class TestTextReports:
    """Test the plain text report formats."""

    def test_frequency_report(self):
        report = format_frequency_report({"a": 3, "b": 1})
        assert report == (
            "Key Event Frequency Analysis:\n"
            "-------------------------------\n"
            "a: 3\n"
            "b: 1\n"
        )

    def test_bigram_report(self):
        report = format_bigram_report(["a", "a", "b", "a"], top_n=2)
        lines = report.splitlines()

        assert lines[0] == "Bigram Frequency Analysis (top 2):"
        assert lines[2:] == ["a a: 1", "a b: 1"]


class TestReportGenerator:
    """Test writing reports to disk."""

    def test_all_formats(self, session):
        renders = compose_layouts(session.layouts, session.frequencies)
        with tempfile.TemporaryDirectory() as temp_dir:
            generator = ReportGenerator(Path(temp_dir) / "reports", top_n=5)
            generated_files = generator.generate(session, renders, ["json", "html", "csv"])

            assert set(generated_files) == {"json", "html", "csv"}
            for file_path in generated_files.values():
                assert Path(file_path).exists()
                assert Path(file_path).stat().st_size > 0

            with open(generated_files["json"], encoding="utf-8") as f:
                results = json.load(f)
            assert results["metadata"]["total_events"] == 4
            assert results["frequencies"][0] == {"token": "a", "count": 3}
            assert results["bigrams"][0] == {"first": "a", "second": "a", "count": 1}
            assert results["heatmap"][0]["title"] == "MINI"

            page = Path(generated_files["html"]).read_text(encoding="utf-8")
            assert "<circle" in page
            assert "hsl(0, 100%, 30%)" in page
            assert "&lt;" in page

            df = pd.read_csv(generated_files["csv"])
            assert list(df["token"]) == ["a", "b"]
            assert list(df["count"]) == [3, 1]

    def test_html_without_heatmap(self, session):
        with tempfile.TemporaryDirectory() as temp_dir:
            generator = ReportGenerator(temp_dir)
            generated_files = generator.generate(session, (), ["html"])
            page = Path(generated_files["html"]).read_text(encoding="utf-8")
            assert "<svg" not in page
            assert "a: 3" in page

    def test_empty_session(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            generator = ReportGenerator(temp_dir)
            assert generator.generate(AnalysisSession(), (), ["json"]) == {}

    def test_unknown_format_skipped(self, session):
        with tempfile.TemporaryDirectory() as temp_dir:
            generator = ReportGenerator(temp_dir)
            assert generator.generate(session, (), ["pdf"]) == {}

    def test_svg_view_box_covers_shifted_layouts(self, session):
        layouts = [
            Layout("left", (LayoutKey("a", 30, 70),)),
            Layout("right", (LayoutKey("a", 30, 70),)),
        ]
        renders = compose_layouts(layouts, session.frequencies, offset=(-400, 0))

        with tempfile.TemporaryDirectory() as temp_dir:
            svg = ReportGenerator(temp_dir, key_radius=20)._render_svg(renders)

        # Keys at x=30 and x=-370, titles at x=150 and x=-250
        assert 'width="600" height="120"' in svg
        assert 'viewBox="-410 -10 600 120"' in svg
