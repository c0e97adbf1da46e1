# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of LineBlame, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

import dataclasses
import enum
import json
import logging
import os

from lineblame.qt import *

logger = logging.getLogger(__name__)


class PrefsFile:
    """
    Dataclass mixin that persists its public fields to a JSON file
    in the user's configuration directory.
    """

    _filename = ""
    _allowMakeDirs = True
    _dirty = False

    def getParentDir(self) -> str:
        return QStandardPaths.writableLocation(QStandardPaths.StandardLocation.AppConfigLocation)

    def fullPath(self) -> str:
        assert self._filename, "PrefsFile subclass must set _filename"
        return os.path.join(self.getParentDir(), self._filename)

    def reset(self):
        for field in dataclasses.fields(self):
            if field.default is not dataclasses.MISSING:
                setattr(self, field.name, field.default)
            elif field.default_factory is not dataclasses.MISSING:
                setattr(self, field.name, field.default_factory())
        self._dirty = False

    def setDirty(self):
        self._dirty = True

    def isDirty(self) -> bool:
        return self._dirty

    def write(self, force=False):
        if not force and not self._dirty:
            return

        if APP_TESTMODE:
            logger.info(f"Test mode: not writing {self._filename}")
            self._dirty = False
            return

        path = self.fullPath()
        if self._allowMakeDirs:
            os.makedirs(os.path.dirname(path), exist_ok=True)

        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.toDict(), f, indent="\t")

        logger.info(f"Wrote {path}")
        self._dirty = False

    def load(self) -> bool:
        if APP_TESTMODE:
            return False

        path = self.fullPath()

        try:
            with open(path, encoding="utf-8") as f:
                obj = json.load(f)
        except FileNotFoundError:
            return False
        except (OSError, ValueError) as exc:
            logger.warning(f"Couldn't read {path}: {exc}")
            return False

        self.fromDict(obj)
        self._dirty = False
        return True

    def toDict(self) -> dict:
        return {
            field.name: getattr(self, field.name)
            for field in dataclasses.fields(self)
            if not field.name.startswith("_")
        }

    def fromDict(self, obj: dict):
        fieldTypes = {field.name: field.type for field in dataclasses.fields(self)}

        for key, value in obj.items():
            if key.startswith("_") or key not in fieldTypes:
                logger.warning(f"{self._filename}: ignoring unknown key '{key}'")
                continue

            fieldType = fieldTypes[key]
            if isinstance(fieldType, type) and issubclass(fieldType, enum.Enum):
                try:
                    value = fieldType(value)
                except ValueError:
                    logger.warning(f"{self._filename}: invalid value for '{key}': {value}")
                    continue
            elif fieldType is float and type(value) is int:
                value = float(value)
            elif isinstance(fieldType, type) and not isinstance(value, fieldType):
                logger.warning(f"{self._filename}: wrong type for '{key}': {value}")
                continue

            setattr(self, key, value)
