"""
Provide an API that lets code express arbitrary requirements.
"""

from __future__ import annotations

import shutil
from abc import ABC, abstractmethod
from importlib.util import find_spec
from typing import final

from typing_extensions import override

from codeblock.error import UserFacingError


class Requirement(ABC):
    """
    Express a requirement.
    """

    @abstractmethod
    def is_met(self) -> bool:
        """
        Check if the requirement is met.
        """
        pass

    def assert_met(self) -> None:
        """
        Assert that the requirement is met.
        """
        if not self.is_met():
            raise RequirementError(self)
        return None

    @abstractmethod
    def summary(self) -> str:
        """
        Get the requirement's human-readable summary.
        """
        pass

    def details(self) -> str | None:
        """
        Get the requirement's human-readable additional details.
        """
        return None

    @override
    def __str__(self) -> str:
        summary = self.summary()
        details = self.details()
        if details is None:
            return summary
        return f'{summary}\n{"-" * len(summary)}\n{details}'


@final
class RequirementError(UserFacingError, RuntimeError):
    """
    Raised when a requirement is not met.
    """

    def __init__(self, requirement: Requirement):
        super().__init__(str(requirement))
        self._requirement = requirement

    def requirement(self) -> Requirement:
        """
        Get the requirement this error is for.
        """
        return self._requirement


@final
class ModuleRequirement(Requirement):
    """
    Require a Python module to be importable.
    """

    def __init__(self, module_name: str, *, distribution_name: str | None = None):
        super().__init__()
        self._module_name = module_name
        self._distribution_name = distribution_name or module_name

    @override
    def is_met(self) -> bool:
        return find_spec(self._module_name) is not None

    @override
    def summary(self) -> str:
        return f'The Python module "{self._module_name}" must be installed.'

    @override
    def details(self) -> str:
        return f"Install it with `pip install {self._distribution_name}`, or choose a different highlighter."


@final
class ExecutableRequirement(Requirement):
    """
    Require an executable to be available on the ``PATH``.
    """

    def __init__(self, executable: str):
        super().__init__()
        self._executable = executable

    @override
    def is_met(self) -> bool:
        return shutil.which(self._executable) is not None

    @override
    def summary(self) -> str:
        return f'The command "{self._executable}" must be available.'

    @override
    def details(self) -> str:
        return "Make sure it is installed and on your PATH, or choose a different highlighter."
