"""Display bridges that render power snapshots."""

from batmon.display.console import ConsoleDisplay, TemplateRenderer
from batmon.display.protocols import DisplayBridge, MockDisplay

__all__ = ["ConsoleDisplay", "DisplayBridge", "MockDisplay", "TemplateRenderer"]
