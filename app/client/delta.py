"""
Дельта содержимого редактора в формате Quill.

Дельта - список операций insert / retain / delete, каждая может нести
атрибуты форматирования. Для автосохранения нужны только compose() и length().
"""
import json
import math
from enum import Enum
from typing import Optional, List, Dict, Any, Union


class OperationType(Enum):
    """Типы операций дельты"""
    INSERT = "insert"
    DELETE = "delete"
    RETAIN = "retain"


Op = Dict[str, Any]


def op_type(op: Op) -> OperationType:
    if "delete" in op:
        return OperationType.DELETE
    if "retain" in op:
        return OperationType.RETAIN
    return OperationType.INSERT


def op_length(op: Op) -> int:
    """Длина операции; встроенный объект (картинка и т.п.) имеет длину 1"""
    if "delete" in op:
        return op["delete"]
    if "retain" in op:
        return op["retain"]
    insert = op["insert"]
    return len(insert) if isinstance(insert, str) else 1


def compose_attributes(
    base: Optional[Dict[str, Any]],
    changes: Optional[Dict[str, Any]],
    keep_null: bool
) -> Optional[Dict[str, Any]]:
    """Наложение атрибутов; None означает снятие форматирования"""
    merged = dict(base or {})
    merged.update(changes or {})
    if not keep_null:
        merged = {key: value for key, value in merged.items() if value is not None}
    return merged or None


class _OpIterator:
    """Проход по операциям с возможностью откусывать их частями"""

    def __init__(self, ops: List[Op]):
        self.ops = ops
        self.index = 0
        self.offset = 0

    def has_next(self) -> bool:
        return self.peek_length() < math.inf

    def peek(self) -> Optional[Op]:
        return self.ops[self.index] if self.index < len(self.ops) else None

    def peek_length(self) -> float:
        op = self.peek()
        return op_length(op) - self.offset if op else math.inf

    def peek_type(self) -> OperationType:
        op = self.peek()
        return op_type(op) if op else OperationType.RETAIN

    def next(self, length: float = math.inf) -> Op:
        op = self.peek()
        if op is None:
            return {"retain": math.inf}

        offset = self.offset
        remaining = op_length(op) - offset
        if length >= remaining:
            length = remaining
            self.index += 1
            self.offset = 0
        else:
            self.offset += length

        kind = op_type(op)
        if kind is OperationType.DELETE:
            return {"delete": length}

        result: Op = {}
        if kind is OperationType.RETAIN:
            result["retain"] = length
        elif isinstance(op["insert"], str):
            result["insert"] = op["insert"][offset:offset + length]
        else:
            result["insert"] = op["insert"]
        if op.get("attributes"):
            result["attributes"] = op["attributes"]
        return result


class Delta:
    """Последовательность операций над документом"""

    def __init__(self, ops: Optional[List[Op]] = None):
        self.ops: List[Op] = []
        for op in ops or []:
            self.push(dict(op))

    def insert(self, text: Union[str, Dict[str, Any]], attributes: Optional[Dict[str, Any]] = None) -> "Delta":
        if isinstance(text, str) and not text:
            return self
        op: Op = {"insert": text}
        if attributes:
            op["attributes"] = attributes
        return self.push(op)

    def retain(self, length: int, attributes: Optional[Dict[str, Any]] = None) -> "Delta":
        if length <= 0:
            return self
        op: Op = {"retain": length}
        if attributes:
            op["attributes"] = attributes
        return self.push(op)

    def delete(self, length: int) -> "Delta":
        if length <= 0:
            return self
        return self.push({"delete": length})

    def push(self, op: Op) -> "Delta":
        """Добавление операции со слиянием соседних однотипных"""
        if not self.ops:
            self.ops.append(op)
            return self

        last = self.ops[-1]
        kind, last_kind = op_type(op), op_type(last)

        if kind is OperationType.DELETE and last_kind is OperationType.DELETE:
            self.ops[-1] = {"delete": last["delete"] + op["delete"]}
            return self

        # Вставка всегда идет перед удалением в той же позиции
        if last_kind is OperationType.DELETE and kind is OperationType.INSERT:
            if len(self.ops) == 1:
                self.ops.insert(0, op)
                return self
            self.ops.pop()
            self.push(op)
            self.ops.append(last)
            return self

        if op.get("attributes") == last.get("attributes"):
            if (kind is OperationType.INSERT and last_kind is OperationType.INSERT
                    and isinstance(op["insert"], str) and isinstance(last["insert"], str)):
                merged = {"insert": last["insert"] + op["insert"]}
                if op.get("attributes"):
                    merged["attributes"] = op["attributes"]
                self.ops[-1] = merged
                return self
            if kind is OperationType.RETAIN and last_kind is OperationType.RETAIN:
                merged = {"retain": last["retain"] + op["retain"]}
                if op.get("attributes"):
                    merged["attributes"] = op["attributes"]
                self.ops[-1] = merged
                return self

        self.ops.append(op)
        return self

    def chop(self) -> "Delta":
        """Отбрасывание хвостового retain без атрибутов"""
        if self.ops and op_type(self.ops[-1]) is OperationType.RETAIN and not self.ops[-1].get("attributes"):
            self.ops.pop()
        return self

    def compose(self, other: "Delta") -> "Delta":
        """Дельта, эквивалентная применению self, а затем other"""
        this_iter = _OpIterator(self.ops)
        other_iter = _OpIterator(other.ops)
        result = Delta()

        while this_iter.has_next() or other_iter.has_next():
            if other_iter.peek_type() is OperationType.INSERT:
                result.push(other_iter.next())
            elif this_iter.peek_type() is OperationType.DELETE:
                result.push(this_iter.next())
            else:
                length = min(this_iter.peek_length(), other_iter.peek_length())
                this_op = this_iter.next(length)
                other_op = other_iter.next(length)

                if "retain" in other_op:
                    new_op: Op = {}
                    if "retain" in this_op:
                        new_op["retain"] = length
                    else:
                        new_op["insert"] = this_op["insert"]
                    attributes = compose_attributes(
                        this_op.get("attributes"),
                        other_op.get("attributes"),
                        keep_null="retain" in this_op
                    )
                    if attributes:
                        new_op["attributes"] = attributes
                    result.push(new_op)
                elif "delete" in other_op and "retain" in this_op:
                    result.push(other_op)
                # insert из self, удаленный в other, просто исчезает

        return result.chop()

    def length(self) -> int:
        return sum(op_length(op) for op in self.ops)

    def to_json(self) -> str:
        return json.dumps({"ops": self.ops})

    @classmethod
    def from_json(cls, payload: str) -> "Delta":
        data = json.loads(payload) if payload else {}
        ops = data.get("ops", []) if isinstance(data, dict) else data
        return cls(ops)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Delta):
            return False
        return self.ops == other.ops

    def __repr__(self) -> str:
        return f"Delta({self.ops})"
