"""
文本提取器

根据声明的媒体类型分发：
- PDF：pdfplumber 逐页提取并拼接
- Word（application/msword 或 wordprocessingml）：python-docx 按文档顺序提取段落和表格文本，忽略格式
"""

import io
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator

import pdfplumber
from docx import Document
from docx.oxml.ns import qn
from docx.text.paragraph import Paragraph

from resume_analyzer.core.errors import (
    ExtractionFailed,
    InsufficientText,
    UnsupportedMediaType,
)

logger = logging.getLogger(__name__)

# 规范化文本的最小长度，低于该值视为无有效内容（例如没有文字层的扫描件）
MIN_TEXT_LENGTH = 50

PDF_MIME_TYPE = "application/pdf"
MSWORD_MIME_TYPE = "application/msword"

_WHITESPACE_RE = re.compile(r"\s+")
_NEWLINES_RE = re.compile(r"\n+")


@dataclass
class ExtractedText:
    """提取结果：原始文本和解析器元数据"""
    text: str
    metadata: Dict[str, Any] = field(default_factory=dict)


def is_pdf(mime_type: str) -> bool:
    return mime_type == PDF_MIME_TYPE


def is_word_document(mime_type: str) -> bool:
    return mime_type == MSWORD_MIME_TYPE or "wordprocessingml" in mime_type


def extract_from_pdf(data: bytes) -> ExtractedText:
    """逐页提取 PDF 文本"""
    pages = []
    with pdfplumber.open(io.BytesIO(data)) as pdf:
        for page in pdf.pages:
            pages.append(page.extract_text() or "")
        info = {k: v for k, v in (pdf.metadata or {}).items() if v}
        page_count = len(pdf.pages)

    return ExtractedText(
        text="\n".join(pages),
        metadata={"pages": page_count, "info": info}
    )


def _iter_block_text(container, parent) -> Iterator[str]:
    """
    按文档顺序产出块级元素的文本

    段落直接取文本；表格逐行逐单元格展开，单元格内的嵌套表格递归处理。
    横向合并的单元格在 XML 中只有一个 w:tc，不会重复。
    """
    for child in container.iterchildren():
        if child.tag == qn("w:p"):
            yield Paragraph(child, parent).text
        elif child.tag == qn("w:tbl"):
            for row in child.iterchildren(qn("w:tr")):
                for cell in row.iterchildren(qn("w:tc")):
                    yield from _iter_block_text(cell, parent)


def extract_from_word(data: bytes) -> ExtractedText:
    """提取 Word 文档的纯文本（正文段落和表格单元格），忽略格式"""
    doc = Document(io.BytesIO(data))
    blocks = list(_iter_block_text(doc.element.body, doc))
    return ExtractedText(
        text="\n".join(blocks),
        metadata={"paragraphs": len(doc.paragraphs), "tables": len(doc.tables)}
    )


def extract_text(data: bytes, mime_type: str) -> ExtractedText:
    """
    从原始字节中提取文本

    Args:
        data: 文件字节
        mime_type: 声明的媒体类型

    Returns:
        ExtractedText（未规范化）

    Raises:
        UnsupportedMediaType: 既不是 PDF 也不是 Word
        ExtractionFailed: 底层解析库抛出异常，不重试
    """
    mime_type = (mime_type or "").strip().lower()

    if is_pdf(mime_type):
        extractor = extract_from_pdf
    elif is_word_document(mime_type):
        extractor = extract_from_word
    else:
        raise UnsupportedMediaType(mime_type)

    try:
        return extractor(data)
    except Exception as e:
        logger.warning("[TextExtractor] %s extraction failed: %s", mime_type, e)
        raise ExtractionFailed(e) from e


def normalize_text(text: str) -> str:
    """
    规范化文本：空白串压缩为单个空格，连续换行压缩为一个，去除首尾空白

    纯函数且幂等：normalize_text(normalize_text(x)) == normalize_text(x)
    """
    if not text:
        return ""
    return _NEWLINES_RE.sub("\n", _WHITESPACE_RE.sub(" ", text)).strip()


def ensure_sufficient_text(text: str, minimum: int = MIN_TEXT_LENGTH) -> str:
    """
    校验规范化文本长度

    Raises:
        InsufficientText: 长度小于 minimum
    """
    if len(text) < minimum:
        raise InsufficientText(len(text), minimum)
    return text
