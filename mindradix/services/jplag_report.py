"""Summaries of external JPlag-style CSV similarity reports."""
import csv
import io
import math
import re
from typing import Any, Dict, List

_SIMILARITY_HEADER_RE = re.compile(r'similar', re.IGNORECASE)
MAX_REPORTED_PAIRS = 20


def _to_float(value: str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return 0.0 if math.isnan(number) else number


def parse_jplag_csv(csv_text: str) -> Dict[str, Any]:
    """
    解析 JPlag 导出的 CSV

    第一列、第二列为两个提交的名称；相似度列取第一个匹配 /similar/i 的表头，
    否则取最后一列。带引号的字段可以包含逗号。无法解析的数值记为 0。

    Returns:
        {max_similarity, avg_similarity, pairs} 或 {notice: "no-rows"}
    """
    reader = csv.reader(io.StringIO((csv_text or "").strip()))
    rows = [[col.strip() for col in row] for row in reader]
    rows = [row for row in rows if any(row)]
    if len(rows) <= 1:
        return {"notice": "no-rows"}

    header = rows[0]
    sim_idx = next((i for i, name in enumerate(header) if _SIMILARITY_HEADER_RE.search(name)), len(header) - 1)

    pairs: List[Dict[str, Any]] = []
    for cols in rows[1:]:
        pairs.append({
            "a": cols[0],
            "b": cols[1] if len(cols) > 1 else "",
            "similarity": _to_float(cols[sim_idx]) if sim_idx < len(cols) else 0.0,
        })

    max_similarity = max((pair["similarity"] for pair in pairs), default=0.0)
    avg_similarity = sum(pair["similarity"] for pair in pairs) / max(1, len(pairs))
    return {
        "max_similarity": max(0.0, max_similarity),
        "avg_similarity": avg_similarity,
        "pairs": pairs[:MAX_REPORTED_PAIRS],
    }
