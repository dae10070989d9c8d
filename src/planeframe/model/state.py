"""
Project State (Data Model)
==========================
This module defines the central data structure for the running application.

Why is this file needed?
------------------------
1. State Management: It holds the current structural model and the file it
   belongs to in one place.
2. Persistence: Its model is what gets serialized when saving a project.
3. Decoupling: Views read from this object; the model store writes to it.

Classes:
    ProjectState: The main container class.
"""
from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Optional

from planeframe.model.structure import StructuralModel

logger = logging.getLogger(__name__)


@dataclass
class ProjectState:
    """
    Singleton-like class that holds the entire state of the open project.
    Pass this instance to the model store.
    """
    model: StructuralModel = field(default_factory=StructuralModel)
    filepath: Optional[str] = None
    is_modified: bool = False

    @property
    def project_name(self) -> str:
        return self.model.name

    def reset(self) -> None:
        """Clear all data for a new project"""
        self.model = StructuralModel()
        self.filepath = None
        self.is_modified = False
        logger.info("Project state has been reset.")
