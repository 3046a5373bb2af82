# ABOUTME: Locale-keyed status messages shown to the user
from typing import Dict, Sequence

DEFAULT_LANGUAGES = ("en", "ja")

MESSAGES: Dict[str, Dict[str, str]] = {
    "no_log_selected": {
        "en": "Please select a log file to analyze.",
        "ja": "ファイルを選択してください。",
    },
    "no_log_data": {
        "en": "No log data available. Please analyze a log file first.",
        "ja": "データがありません。先にファイルを解析してください。",
    },
    "layouts_not_loaded": {
        "en": "Layouts not loaded. Please check your layout JSON files.",
        "ja": "レイアウトが読み込まれていません。JSONファイルを確認してください。",
    },
    "no_tokens": {
        "en": "No key events available for bigram analysis. Please analyze a log file first.",
        "ja": "バイグラム解析に使えるキー入力がありません。先にファイルを解析してください。",
    },
    "layout_missing": {
        "en": "Layout {name} could not be loaded.",
        "ja": "レイアウト {name} を読み込めませんでした。",
    },
}


def format_message(
    message_id: str, languages: Sequence[str] = DEFAULT_LANGUAGES, **params: str
) -> str:
    """Render a status message in each requested locale, one per line."""
    translations = MESSAGES[message_id]
    lines = [
        translations[lang].format(**params)
        for lang in languages
        if lang in translations
    ]
    if not lines:
        lines = [translations["en"].format(**params)]
    return "\n".join(lines)
