"""
参数存储

坐标系持久化使用的键值存储:
- DictParamStore: 进程内存储
- YamlParamStore: YAML 文件存储，每次 set 整体重写
"""
import copy
import logging
import os
import threading
from typing import Any, Dict, Optional

import yaml

from ..core.interfaces import IParamStore

logger = logging.getLogger(__name__)


class DictParamStore(IParamStore):
    """进程内参数存储"""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._lock = threading.Lock()
        self._params: Dict[str, Any] = dict(initial or {})

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return copy.deepcopy(self._params.get(key, default))

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._params[key] = copy.deepcopy(value)

    def as_dict(self) -> Dict[str, Any]:
        with self._lock:
            return copy.deepcopy(self._params)


class YamlParamStore(IParamStore):
    """
    YAML 文件参数存储

    文件不存在时视为空；读取失败时记录警告并视为空。
    set() 先写临时文件再替换，写入失败时抛出 OSError / yaml.YAMLError。
    """

    def __init__(self, path: str):
        self._path = path
        self._lock = threading.Lock()
        self._params: Dict[str, Any] = self._load()

    @property
    def path(self) -> str:
        return self._path

    def _load(self) -> Dict[str, Any]:
        if not os.path.exists(self._path):
            return {}
        try:
            with open(self._path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Cannot read param store {self._path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Param store {self._path} does not contain a mapping, ignored")
            return {}
        return data

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return copy.deepcopy(self._params.get(key, default))

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            params = dict(self._params)
            params[key] = value
            tmp_path = f'{self._path}.tmp'
            directory = os.path.dirname(self._path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(tmp_path, 'w', encoding='utf-8') as f:
                yaml.safe_dump(params, f, default_flow_style=False, allow_unicode=True)
            os.replace(tmp_path, self._path)
            self._params = params


def create_param_store(config: Dict[str, Any]) -> IParamStore:
    """按 param_store.path 创建参数存储"""
    path = (config.get('param_store') or {}).get('path')
    if path:
        return YamlParamStore(path)
    return DictParamStore()
