from typing import Dict, List, Optional


class KeyValueStore:
    """In-memory string store backing the `database` module."""
    def __init__(self):
        self.entries: Dict[str, str] = {}

    def set(self, key: str, value: str):
        self.entries[key] = value

    def get(self, key: str) -> Optional[str]:
        return self.entries.get(key)

    def delete(self, key: str):
        self.entries.pop(key, None)

    def exists(self, key: str) -> bool:
        return key in self.entries

    def keys(self) -> List[str]:
        return list(self.entries)

    def clear(self):
        self.entries.clear()
