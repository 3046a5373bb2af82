# ABOUTME: Text reports and JSON/HTML/CSV exports of key-log analysis results
import html
import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, TYPE_CHECKING, Union
import logging

import pandas as pd

from .analyzer import count_bigrams, rank_bigrams, rank_frequencies
from .heatmap import LayoutRender

if TYPE_CHECKING:
    from .session import AnalysisSession

FREQUENCY_HEADER = "Key Event Frequency Analysis:\n-------------------------------"
BIGRAM_HEADER = "Bigram Frequency Analysis (top {top_n}):\n-------------------------------"


def format_frequency_report(frequencies: Mapping[str, int]) -> str:
    """Render ``token: count`` lines, most frequent first."""
    lines = [FREQUENCY_HEADER]
    for token, count in rank_frequencies(frequencies):
        lines.append(f"{token}: {count}")
    return "\n".join(lines) + "\n"


def format_bigram_report(tokens: Sequence[str], top_n: int = 10) -> str:
    """Render the ``top_n`` bigrams as ``first second: count`` lines."""
    lines = [BIGRAM_HEADER.format(top_n=top_n)]
    for (first, second), count in rank_bigrams(count_bigrams(tokens), top_n):
        lines.append(f"{first} {second}: {count}")
    return "\n".join(lines) + "\n"


class ReportGenerator:
    """Write analysis results to timestamped report files."""

    def __init__(
        self,
        reports_dir: Union[str, Path] = "./reports",
        top_n: int = 10,
        key_radius: int = 20,
    ):
        self.reports_dir = Path(reports_dir)
        self.reports_dir.mkdir(parents=True, exist_ok=True)
        self.top_n = top_n
        self.key_radius = key_radius

    def build_results(
        self, session: "AnalysisSession", renders: Sequence[LayoutRender] = ()
    ) -> Dict[str, Any]:
        """Collect everything worth exporting into one JSON-friendly dict."""
        bigrams = rank_bigrams(count_bigrams(session.tokens), self.top_n)
        return {
            "metadata": {
                "analysis_timestamp": datetime.now().isoformat(),
                "total_events": len(session.tokens),
                "distinct_tokens": len(session.frequencies),
                "layouts": [layout.name for layout in session.layouts],
            },
            "frequencies": [
                {"token": token, "count": count}
                for token, count in rank_frequencies(session.frequencies)
            ],
            "bigrams": [
                {"first": first, "second": second, "count": count}
                for (first, second), count in bigrams
            ],
            "heatmap": [render.to_dict() for render in renders],
        }

    def generate(
        self,
        session: "AnalysisSession",
        renders: Sequence[LayoutRender] = (),
        formats: Optional[List[str]] = None,
    ) -> Dict[str, str]:
        """Generate reports in the requested formats, returning their paths."""
        if not session.tokens:
            logging.error("No analysis results available. Analyze a log first.")
            return {}

        formats = formats or ["json", "html"]
        generated_files = {}
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")

        for format_type in formats:
            if format_type == "json":
                filename = self.reports_dir / f"keyheat_analysis_{timestamp}.json"
                with open(filename, "w", encoding="utf-8") as f:
                    json.dump(
                        self.build_results(session, renders),
                        f,
                        indent=2,
                        ensure_ascii=False,
                    )
                generated_files["json"] = str(filename)

            elif format_type == "html":
                filename = self.reports_dir / f"keyheat_analysis_{timestamp}.html"
                self._generate_html_report(filename, session, renders)
                generated_files["html"] = str(filename)

            elif format_type == "csv":
                filename = self.reports_dir / f"keyheat_frequencies_{timestamp}.csv"
                self._export_csv_data(filename, session)
                generated_files["csv"] = str(filename)

            else:
                logging.warning(f"Unknown report format {format_type}, skipping")

        logging.info(f"Generated reports: {list(generated_files.keys())}")
        return generated_files

    def _render_svg(self, renders: Sequence[LayoutRender]) -> str:
        """Draw every layout as filled circles with centered labels."""
        if not renders:
            return ""

        # Keys and titles both have to fit, including layouts shifted negative
        margin = self.key_radius * 2
        xs = [key.x for render in renders for key in render.keys]
        ys = [key.y for render in renders for key in render.keys]
        xs.extend(render.title_x for render in renders)
        ys.extend(render.title_y for render in renders)
        min_x, min_y = min(xs) - margin, min(ys) - margin
        width = max(xs) - min(xs) + 2 * margin
        height = max(ys) - min(ys) + 2 * margin

        parts = [
            f'<svg xmlns="http://www.w3.org/2000/svg" width="{width:g}" height="{height:g}" '
            f'viewBox="{min_x:g} {min_y:g} {width:g} {height:g}">'
        ]
        for render in renders:
            parts.append(
                f'<text x="{render.title_x:g}" y="{render.title_y:g}" '
                f'font-size="16" text-anchor="middle" fill="#000000">'
                f"{html.escape(render.title)}</text>"
            )
            for key in render.keys:
                parts.append(
                    f'<circle cx="{key.x:g}" cy="{key.y:g}" r="{self.key_radius}" '
                    f'fill="{key.color.css()}"><title>{html.escape(key.label)}: '
                    f"{key.frequency}</title></circle>"
                )
                parts.append(
                    f'<text x="{key.x:g}" y="{key.y:g}" font-size="20" '
                    f'text-anchor="middle" dominant-baseline="middle" fill="#777777">'
                    f"{html.escape(key.label)}</text>"
                )
        parts.append("</svg>")
        return "\n".join(parts)

    def _generate_html_report(
        self, filename: Path, session: "AnalysisSession", renders: Sequence[LayoutRender]
    ) -> None:
        frequency_text = html.escape(format_frequency_report(session.frequencies))
        bigram_text = html.escape(format_bigram_report(session.tokens, self.top_n))
        generated_at = datetime.now().strftime("%Y-%m-%d %H:%M:%S")

        html_content = f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <title>Key Event Heatmap Report</title>
    <style>
        body {{ font-family: sans-serif; margin: 20px; }}
        .reports {{ display: flex; gap: 40px; }}
        pre {{ background: #f5f5f5; padding: 10px; }}
    </style>
</head>
<body>
    <h1>Key Event Heatmap Report</h1>
    <p>Generated {generated_at} from {len(session.tokens):,} key events</p>
    <div class="heatmap">
{self._render_svg(renders)}
    </div>
    <div class="reports">
        <pre>{frequency_text}</pre>
        <pre>{bigram_text}</pre>
    </div>
</body>
</html>
"""

        with open(filename, "w", encoding="utf-8") as f:
            f.write(html_content)

    def _export_csv_data(self, filename: Path, session: "AnalysisSession") -> None:
        """Export ranked token frequencies to CSV format."""
        total = len(session.tokens)
        data = [
            {
                "rank": rank,
                "token": token,
                "count": count,
                "share": count / total if total else 0.0,
            }
            for rank, (token, count) in enumerate(rank_frequencies(session.frequencies), 1)
        ]

        df = pd.DataFrame(data, columns=["rank", "token", "count", "share"])
        df.to_csv(filename, index=False)
