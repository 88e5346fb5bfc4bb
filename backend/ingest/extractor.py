"""
Trade extraction — turns an XML document into TradeRecord values.

    <trades>
      <trade>
        <date>2024-01-02</date> <symbol>AAPL</symbol> <type>BUY</type>
        <quantity>100</quantity> <price>185.64</price>
        <counterparty>Goldman</counterparty>
      </trade>
      ...
    </trades>
"""

import re
import xml.etree.ElementTree as ET
from typing import Optional

from backend.errors import MalformedDocument
from backend.models import TradeRecord

TRADE_TAG = "trade"

_INT_PREFIX_RE = re.compile(r"^\s*[+-]?\d+")
_FLOAT_PREFIX_RE = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def _field_text(trade: ET.Element, tag: str) -> Optional[str]:
    """Full text of the first descendant named *tag*, or None."""
    el = trade.find(f".//{tag}")
    if el is None:
        return None
    return "".join(el.itertext())


def parse_int(text: Optional[str]) -> int:
    """Leading base-10 integer of *text*; 0 when there is none."""
    m = _INT_PREFIX_RE.match(text or "")
    return int(m.group()) if m else 0


def parse_float(text: Optional[str]) -> float:
    """Leading decimal number of *text*; 0.0 when there is none."""
    m = _FLOAT_PREFIX_RE.match(text or "")
    return float(m.group()) if m else 0.0


def extract_trades(document_text: str) -> list[TradeRecord]:
    """
    Parse *document_text* and return every trade element in document order.

    Raises ``MalformedDocument`` when the text is not well-formed XML.
    Missing fields never fail extraction.
    """
    try:
        root = ET.fromstring(document_text)
    except ET.ParseError as e:
        raise MalformedDocument(f"Invalid XML file format: {e}") from e

    trades = []
    for el in root.iter(TRADE_TAG):
        trades.append(TradeRecord(
            date=_field_text(el, "date"),
            symbol=_field_text(el, "symbol"),
            type=_field_text(el, "type"),
            quantity=parse_int(_field_text(el, "quantity")),
            price=parse_float(_field_text(el, "price")),
            counterparty=_field_text(el, "counterparty"),
        ))
    return trades
