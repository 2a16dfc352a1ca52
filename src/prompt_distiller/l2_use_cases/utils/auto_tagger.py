"""Keyword-table auto-tagging of template content."""

from __future__ import annotations

# Declaration order is the output order of auto_tag().
AUTO_TAG_KEYWORDS: dict[str, tuple[str, ...]] = {
    'programming': ('代码', '程序', 'function', 'class', 'api', 'bug', 'debug', '算法', '开发'),
    'writing': ('文章', '写作', '文案', '内容', '编辑', '润色', '段落', '标题'),
    'translation': ('翻译', '英文', '英语', '中文', '语言', 'convert', 'translate'),
    'qa': ('回答', '问题', '解释', '说明', '什么', '如何', '为什么'),
    'summarization': ('总结', '摘要', '概括', '提炼', '核心', '要点', '归纳'),
    'brainstorming': ('创意', '想法', '建议', '方案', ' brainstorm', '创新'),
    'data-analysis': ('分析', '数据', '统计', '图表', '报告', 'excel', 'sql'),
}


def auto_tag(content: str, table: dict[str, tuple[str, ...]] | None = None) -> list[str]:
    """Return every tag whose keywords occur (case-insensitively) as substrings of *content*."""
    lowered = content.lower()
    table = AUTO_TAG_KEYWORDS if table is None else table
    return [tag for tag, keywords in table.items() if any(kw.lower() in lowered for kw in keywords)]
