"""内存版 Redis（仅实现测试用到的命令）

模拟 decode_responses=True 的 redis-py 客户端：成员和键名都是 str。
所有命令在同一把锁内执行，与真实 Redis 的单命令原子性一致。
"""

import re
import threading


def _glob_to_regex(pattern):
    """按 Redis 的 glob 规则（支持反斜杠转义）转换为正则"""
    parts = []
    i = 0
    while i < len(pattern):
        c = pattern[i]
        if c == "\\" and i + 1 < len(pattern):
            parts.append(re.escape(pattern[i + 1]))
            i += 2
            continue
        if c == "*":
            parts.append(".*")
        elif c == "?":
            parts.append(".")
        elif c == "[":
            end = i + 1
            chars = []
            if end < len(pattern) and pattern[end] == "^":
                chars.append("^")
                end += 1
            while end < len(pattern) and pattern[end] != "]":
                if pattern[end] == "\\" and end + 1 < len(pattern):
                    end += 1
                    chars.append(re.escape(pattern[end]))
                elif pattern[end] == "-":
                    chars.append("-")
                else:
                    chars.append(re.escape(pattern[end]))
                end += 1
            parts.append(f"[{''.join(chars)}]")
            i = end + 1
            continue
        else:
            parts.append(re.escape(c))
        i += 1
    return re.compile("".join(parts), re.DOTALL)


def _glob_match(name, pattern):
    return pattern is None or _glob_to_regex(pattern).fullmatch(name) is not None


def _parse_bound(value):
    """解析分数边界，返回 (数值, 是否开区间)"""
    if isinstance(value, (int, float)):
        return float(value), False
    text = str(value)
    exclusive = text.startswith("(")
    if exclusive:
        text = text[1:]
    if text in ("-inf", "-INF"):
        return float("-inf"), exclusive
    if text in ("+inf", "inf", "+INF", "INF"):
        return float("inf"), exclusive
    return float(text), exclusive


def _in_range(score, min_bound, max_bound):
    low, low_open = _parse_bound(min_bound)
    high, high_open = _parse_bound(max_bound)
    above = score > low if low_open else score >= low
    below = score < high if high_open else score <= high
    return above and below


class FakeRedis:
    def __init__(self):
        self.zsets = {}
        self.strings = {}
        self.calls = []
        self._lock = threading.RLock()

    def _record(self, name, *args):
        self.calls.append((name,) + args)

    def _drop_if_empty(self, name):
        if name in self.zsets and not self.zsets[name]:
            del self.zsets[name]

    # ==================== 有序集合 ====================

    def zadd(self, name, mapping, nx=False, xx=False, ch=False, incr=False, gt=False, lt=False):
        with self._lock:
            self._record("zadd", name, dict(mapping), nx)
            zset = self.zsets.setdefault(name, {})
            added = 0
            for member, score in mapping.items():
                member = str(member)
                if member in zset:
                    if nx:
                        continue
                    zset[member] = float(score)
                else:
                    if xx:
                        continue
                    zset[member] = float(score)
                    added += 1
            self._drop_if_empty(name)
            return added

    def zrem(self, name, *values):
        with self._lock:
            self._record("zrem", name, values)
            zset = self.zsets.get(name, {})
            removed = 0
            for value in values:
                if zset.pop(str(value), None) is not None:
                    removed += 1
            self._drop_if_empty(name)
            return removed

    def zscore(self, name, value):
        with self._lock:
            return self.zsets.get(name, {}).get(str(value))

    def zmscore(self, key, members):
        with self._lock:
            if not members:
                raise ValueError("ZMSCORE members must be a non-empty list")
            self._record("zmscore", key, list(members))
            zset = self.zsets.get(key, {})
            return [zset.get(str(m)) for m in members]

    def zremrangebyscore(self, name, min, max):
        with self._lock:
            self._record("zremrangebyscore", name, min, max)
            zset = self.zsets.get(name, {})
            doomed = [m for m, s in zset.items() if _in_range(s, min, max)]
            for member in doomed:
                del zset[member]
            self._drop_if_empty(name)
            return len(doomed)

    def zcount(self, name, min, max):
        with self._lock:
            zset = self.zsets.get(name, {})
            return sum(1 for s in zset.values() if _in_range(s, min, max))

    def zcard(self, name):
        with self._lock:
            return len(self.zsets.get(name, {}))

    def zscan_iter(self, name, match=None, count=None, score_cast_func=float):
        with self._lock:
            items = sorted(self.zsets.get(name, {}).items(), key=lambda kv: (kv[1], kv[0]))
        for member, score in items:
            if _glob_match(member, match):
                yield member, score_cast_func(score)

    # ==================== 通用键 ====================

    def set(self, name, value):
        with self._lock:
            self.strings[name] = str(value)
            return True

    def get(self, name):
        with self._lock:
            return self.strings.get(name)

    def exists(self, *names):
        with self._lock:
            return sum(1 for n in names if n in self.zsets or n in self.strings)

    def delete(self, *names):
        with self._lock:
            self._record("delete", names)
            deleted = 0
            for name in names:
                if self.zsets.pop(name, None) is not None:
                    deleted += 1
                elif self.strings.pop(name, None) is not None:
                    deleted += 1
            return deleted

    def scan_iter(self, match=None, count=None, _type=None):
        with self._lock:
            names = sorted(set(self.zsets) | set(self.strings))
        for name in names:
            if _glob_match(name, match):
                yield name
