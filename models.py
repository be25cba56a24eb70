"""Data models for the Google Docs to Notion markdown conversion pipeline."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union


class AcquisitionPath(Enum):
    """Which fetch strategy produced a document."""
    RICH = "rich"
    DEGRADED = "degraded"


@dataclass(frozen=True)
class TextStyle:
    """Inline formatting flags for a single text run."""

    bold: bool = False
    italic: bool = False
    underline: bool = False
    strikethrough: bool = False
    link_url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize style to dictionary."""
        return {
            'bold': self.bold,
            'italic': self.italic,
            'underline': self.underline,
            'strikethrough': self.strikethrough,
            'link_url': self.link_url
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TextStyle':
        return cls(
            bold=data.get('bold', False),
            italic=data.get('italic', False),
            underline=data.get('underline', False),
            strikethrough=data.get('strikethrough', False),
            link_url=data.get('link_url')
        )


@dataclass(frozen=True)
class TextRun:
    """A span of text sharing one style."""

    text: str
    style: TextStyle = field(default_factory=TextStyle)

    def to_dict(self) -> Dict[str, Any]:
        return {'text': self.text, 'style': self.style.to_dict()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TextRun':
        return cls(text=data['text'], style=TextStyle.from_dict(data.get('style', {})))


@dataclass
class ListInfo:
    """List membership of a paragraph."""

    ordered: bool = False
    nesting_level: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {'ordered': self.ordered, 'nesting_level': self.nesting_level}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ListInfo':
        return cls(ordered=data.get('ordered', False), nesting_level=data.get('nesting_level', 0))


@dataclass
class Paragraph:
    """Represents a paragraph: ordered runs plus heading and list metadata."""

    runs: List[TextRun] = field(default_factory=list)
    heading_level: int = 0  # 0 = body text
    list_info: Optional[ListInfo] = None

    def __post_init__(self) -> None:
        """Validate heading level range."""
        if not 0 <= self.heading_level <= 6:
            raise ValueError(f"heading_level must be between 0 and 6, got {self.heading_level}")

    @property
    def is_heading(self) -> bool:
        return self.heading_level > 0

    def to_dict(self) -> Dict[str, Any]:
        """Serialize paragraph to dictionary."""
        return {
            'type': 'paragraph',
            'runs': [run.to_dict() for run in self.runs],
            'heading_level': self.heading_level,
            'list_info': self.list_info.to_dict() if self.list_info else None
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Paragraph':
        list_data = data.get('list_info')
        return cls(
            runs=[TextRun.from_dict(run) for run in data.get('runs', [])],
            heading_level=data.get('heading_level', 0),
            list_info=ListInfo.from_dict(list_data) if list_data else None
        )


@dataclass
class TableCell:
    """A table cell holding plain paragraphs."""

    paragraphs: List[Paragraph] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {'paragraphs': [p.to_dict() for p in self.paragraphs]}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TableCell':
        return cls(paragraphs=[Paragraph.from_dict(p) for p in data.get('paragraphs', [])])


@dataclass
class Table:
    """Represents a table as rows of cells. Rows are assumed equally wide."""

    rows: List[List[TableCell]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize table to dictionary."""
        return {
            'type': 'table',
            'rows': [[cell.to_dict() for cell in row] for row in self.rows]
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Table':
        return cls(rows=[[TableCell.from_dict(cell) for cell in row] for row in data.get('rows', [])])


BlockElement = Union[Paragraph, Table]


def block_element_from_dict(data: Dict[str, Any]) -> BlockElement:
    """Rebuild a block element from its tagged dictionary form."""
    element_type = data.get('type')
    if element_type == 'paragraph':
        return Paragraph.from_dict(data)
    if element_type == 'table':
        return Table.from_dict(data)
    raise ValueError(f"Unknown block element type: {element_type!r}")


@dataclass
class SubDocument:
    """
    A named body of block elements (a "tab" in Google Docs terms).

    Children are nested sub-documents walked after their parent.
    """

    title: Optional[str] = None
    elements: List[BlockElement] = field(default_factory=list)
    children: List['SubDocument'] = field(default_factory=list)

    def add_child(self, child: 'SubDocument') -> None:
        """Add a nested sub-document."""
        self.children.append(child)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize sub-document to dictionary."""
        return {
            'title': self.title,
            'elements': [element.to_dict() for element in self.elements],
            'children': [child.to_dict() for child in self.children]
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SubDocument':
        return cls(
            title=data.get('title'),
            elements=[block_element_from_dict(e) for e in data.get('elements', [])],
            children=[cls.from_dict(c) for c in data.get('children', [])]
        )


@dataclass
class SingleBody:
    """Document layout with one body and no tabs."""

    body: SubDocument = field(default_factory=SubDocument)

    def to_dict(self) -> Dict[str, Any]:
        return {'kind': 'single_body', 'body': self.body.to_dict()}


@dataclass
class Tabbed:
    """Document layout with an ordered list of top-level tabs."""

    tabs: List[SubDocument] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {'kind': 'tabbed', 'tabs': [tab.to_dict() for tab in self.tabs]}


DocumentLayout = Union[SingleBody, Tabbed]


@dataclass
class Document:
    """Represents a fetched document: a title plus a single body or a list of tabs."""

    title: Optional[str]
    layout: DocumentLayout = field(default_factory=SingleBody)

    @property
    def is_tabbed(self) -> bool:
        return isinstance(self.layout, Tabbed)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize document to dictionary."""
        return {'title': self.title, 'layout': self.layout.to_dict()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Document':
        """Deserialize from dictionary."""
        layout_data = data.get('layout', {})
        kind = layout_data.get('kind', 'single_body')

        if kind == 'tabbed':
            layout = Tabbed(tabs=[SubDocument.from_dict(t) for t in layout_data.get('tabs', [])])
        elif kind == 'single_body':
            layout = SingleBody(body=SubDocument.from_dict(layout_data.get('body', {})))
        else:
            raise ValueError(f"Unknown document layout kind: {kind!r}")

        return cls(title=data.get('title'), layout=layout)


@dataclass
class Section:
    """A titled span of content bounded by headings."""

    title: str
    content: str
    level: int = 1
    parent_label: str = ''
    source_document_name: Optional[str] = None
    is_error: bool = False

    def has_content(self) -> bool:
        """Check if the section carries any non-whitespace content."""
        return bool(self.content.strip())

    def to_dict(self) -> Dict[str, Any]:
        """Serialize section to dictionary."""
        return {
            'title': self.title,
            'content': self.content,
            'level': self.level,
            'parent_label': self.parent_label,
            'source_document_name': self.source_document_name,
            'is_error': self.is_error
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Section':
        return cls(
            title=data['title'],
            content=data['content'],
            level=data.get('level', 1),
            parent_label=data.get('parent_label', ''),
            source_document_name=data.get('source_document_name'),
            is_error=data.get('is_error', False)
        )


@dataclass
class RenderedUnit:
    """Markdown-rendered form of a section, ready for packaging."""

    title: str
    body: str
    source_document_name: Optional[str] = None
    is_error: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            'title': self.title,
            'body': self.body,
            'source_document_name': self.source_document_name,
            'is_error': self.is_error
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RenderedUnit':
        return cls(
            title=data['title'],
            body=data['body'],
            source_document_name=data.get('source_document_name'),
            is_error=data.get('is_error', False)
        )


@dataclass
class OutputFile:
    """A final markdown file destined for the workspace archive."""

    name: str
    content: str

    def to_dict(self) -> Dict[str, Any]:
        return {'name': self.name, 'content': self.content}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'OutputFile':
        return cls(name=data['name'], content=data['content'])


@dataclass
class DocumentDescriptor:
    """A member document of a collection (Drive folder)."""

    id: str
    name: str

    def to_dict(self) -> Dict[str, Any]:
        return {'id': self.id, 'name': self.name}


@dataclass
class AcquiredDocument:
    """A document together with the acquisition path that produced it."""

    document: Document
    path: AcquisitionPath
    document_id: Optional[str] = None


@dataclass
class ConversionResult:
    """Everything a conversion run produced, plus its report."""

    files: List[OutputFile] = field(default_factory=list)
    units: List[RenderedUnit] = field(default_factory=list)
    sections: List[Section] = field(default_factory=list)
    report: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize result to dictionary."""
        return {
            'files': [f.to_dict() for f in self.files],
            'units': [u.to_dict() for u in self.units],
            'sections': [s.to_dict() for s in self.sections],
            'report': self.report
        }


__all__ = [
    'AcquisitionPath',
    'TextStyle',
    'TextRun',
    'ListInfo',
    'Paragraph',
    'TableCell',
    'Table',
    'BlockElement',
    'block_element_from_dict',
    'SubDocument',
    'SingleBody',
    'Tabbed',
    'DocumentLayout',
    'Document',
    'Section',
    'RenderedUnit',
    'OutputFile',
    'DocumentDescriptor',
    'AcquiredDocument',
    'ConversionResult'
]
