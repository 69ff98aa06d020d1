"""
PureLabel AI - Agents Module

Specialized agents behind the analysis and follow-up flows:
- LocalAnalyst: Offline knowledge-base scoring with embedded OCR
- RemoteAnalyst: Ingredient analysis with Gemini
- CoPilot: Follow-up conversation with Gemini chat
- TextExtractor: Tesseract OCR for label photos
"""

from purelabel.agents.text_extractor import TextExtractor
from purelabel.agents.local_analyst import LocalAnalyst
from purelabel.agents.remote_analyst import RemoteAnalyst
from purelabel.agents.copilot import CoPilot

__all__ = ["LocalAnalyst", "RemoteAnalyst", "CoPilot", "TextExtractor"]
