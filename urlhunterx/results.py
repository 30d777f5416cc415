from __future__ import annotations

import json
import sys
import threading
from typing import Dict, List, Optional, Set, TextIO

from .models import Finding
from .normalize import stable_key


def finding_to_dict(finding: Finding) -> Dict[str, object]:
    return {
        "kind": finding.kind,
        "value": finding.value,
        "source": finding.occurrence.source,
        "line_no": finding.occurrence.line_no,
        "offset": finding.offset,
        "length": len(finding.value),
    }


class ResultStore:
    def __init__(self):
        self._lock = threading.Lock()
        self.unique: Dict[str, Set[str]] = {}
        self.count_total: Dict[str, int] = {}
        self.count_unique: Dict[str, int] = {}
        self.records: Dict[str, Dict[str, Finding]] = {}

    def add(self, finding: Finding) -> bool:
        with self._lock:
            self.count_total[finding.kind] = self.count_total.get(finding.kind, 0) + 1
            keys = self.unique.setdefault(finding.kind, set())
            key = stable_key(finding.kind, finding.value)
            if key in keys:
                return False
            keys.add(key)
            self.count_unique[finding.kind] = self.count_unique.get(finding.kind, 0) + 1
            self.records.setdefault(finding.kind, {})[key] = finding
            return True

    def values(self, kind: Optional[str] = None) -> List[str]:
        with self._lock:
            kinds = [kind] if kind else sorted(self.records)
            return sorted(f.value for k in kinds for f in self.records.get(k, {}).values())

    def summary(self) -> Dict[str, object]:
        with self._lock:
            kinds = sorted(set(self.count_total) | set(self.count_unique))
            return {
                "kinds": {
                    k: {"total": self.count_total.get(k, 0), "unique": self.count_unique.get(k, 0)}
                    for k in kinds
                },
            }


class FindingSink:
    def __init__(self, stream: Optional[TextIO] = None, as_json: bool = False, unique_only: bool = False):
        self.stream = stream or sys.stdout
        self.as_json = as_json
        self.unique_only = unique_only
        self._lock = threading.Lock()

    def write(self, finding: Finding, is_new: bool) -> None:
        if self.unique_only and not is_new:
            return
        if self.as_json:
            line = json.dumps(finding_to_dict(finding), ensure_ascii=False)
        else:
            line = finding.value
        with self._lock:
            self.stream.write(line + "\n")
