from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional, Union
import json
import logging
import threading

from pydantic import TypeAdapter, ValidationError

from ..schemas.chat import ChatMessage

logger = logging.getLogger(__name__)

TOKEN_KEY = "token"
USER_KEY = "user"
CHAT_HISTORY_KEY = "kromium-chat-history"


class KeyValueStore(ABC):
    """String key/value persistence shared by the session and the chat widget."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    def remove(self, key: str) -> None:
        ...


class MemoryStore(KeyValueStore):
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStore(KeyValueStore):
    """Keeps every key in a single JSON object on disk."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._lock = threading.Lock()

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except ValueError:
            logger.warning(f"Ignoring unreadable store file {self.path}")
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data), encoding="utf-8")

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            data = self._read()
            data[key] = value
            self._write(data)

    def remove(self, key: str) -> None:
        with self._lock:
            data = self._read()
            if data.pop(key, None) is not None:
                self._write(data)


_messages_adapter = TypeAdapter(List[ChatMessage])


class ChatHistoryStore:
    """Serializes chat messages under one key of a KeyValueStore."""

    def __init__(self, store: KeyValueStore, key: str = CHAT_HISTORY_KEY):
        self.store = store
        self.key = key

    def load(self) -> List[ChatMessage]:
        raw = self.store.get(self.key)
        if not raw:
            return []
        try:
            return _messages_adapter.validate_json(raw)
        except ValidationError:
            logger.warning(f"Discarding corrupt chat history under {self.key}")
            return []

    def save(self, messages: List[ChatMessage]) -> None:
        self.store.set(self.key, _messages_adapter.dump_json(messages, by_alias=True).decode("utf-8"))

    def clear(self) -> None:
        self.store.remove(self.key)
