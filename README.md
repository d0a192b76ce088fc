# nutkv

Building blocks of an embedded key/value store. They are written in pure
Python and need no third-party packages.

## Modules

### `nutkv.entry`

- `MetaData` is a dataclass with these fields: `key_size`, `value_size`,
  `timestamp`, `ttl`, `flag`, `bucket_size`, `tx_id`, `status`, `ds` and
  `crc`. `payload_size()` returns the bucket, key and value sizes added
  together.
- `Entry` holds `key`, `value`, `bucket` and `meta`.
  - `encode()` builds the stored record. The record starts with a 42-byte
    little-endian header. The bucket, key and value follow, each padded or
    cut to the size given in the metadata. The first four bytes hold a
    CRC-32 of everything after them.
  - `size()` returns the length of the encoded record.
  - `parse_meta(buf)` reads the header back. It raises `ValueError` when
    `buf` is shorter than 42 bytes.
  - `parse_payload(data)` splits `data` into bucket, key and value.
  - `check_payload_size(size)` raises `PayloadSizeMismatchError` when the
    sizes in the metadata do not add up to `size`.
  - `get_crc(buf)` returns a checksum of the header in `buf`, updated with
    the bucket, key and value.
  - `is_zero()` tells whether the entry is empty.
- `Hint` is a dataclass with `key`, `file_id`, `meta` and `data_pos`.

### `nutkv.errors`

`NutsError` is the base of every error that the package raises. It has
these subclasses:

- `DBClosedError`
- `KeyNotFoundError`
- `BucketNotFoundError`
- `BucketEmptyError`
- `KeyEmptyError`
- `PrefixScanError`
- `PrefixSearchScanError`

Each subclass has a predicate: `is_db_closed`, `is_key_not_found`,
`is_bucket_not_found`, `is_bucket_empty`, `is_key_empty`, `is_prefix_scan`
and `is_prefix_search_scan`. A predicate returns true when the error itself
is of that kind. It also returns true when an error of that kind appears
anywhere in the error's `__cause__` / `__context__` chain.

### `nutkv.fd_manager`

`FdManager(max_fd_nums, clean_threshold)` is an LRU cache of read-write
file handles.

- `max_fd_nums` defaults to 256.
- The clean threshold defaults to half of `max_fd_nums`.

Methods:

- `get_fd(path)` opens `path`, creating the file if needed, or returns the
  cached handle. Each call raises the path's use count by one.
- `reduce_using(path)` lowers the use count again.
- `clean_useless_fd()` closes unused handles, least recently used first, up
  to the threshold.
- `close_by_path(path)` closes and forgets one handle.
- `close()` closes every cached handle.

`FdManager` is also a context manager.

`DoubleLinkedList` and `FdInfo` are the list and the node type that the
cache is built on. `paths_from_head()` and `paths_from_tail()` show the
order of the list.

### `nutkv.ds.list`

`List` keeps lists of byte strings by key. It has these operations:

- `rpush`, `lpush`, `rpop`, `lpop`, `rpeek`, `lpeek`
- `size`, `is_empty`
- `lrange`, `ltrim`
- `lrem`, `lrem_num`
- `lset`
- `lrem_by_index`, `lrem_by_index_pre_check`

Each key may carry a TTL, set through the `ttl` and `timestamp` dicts.
`is_expire(key)` drops a list whose time is up. `get_list_ttl(key)` returns
the seconds the list has left.

It raises these errors:

- `ListNotFoundError` for a missing, expired or empty list.
- `IndexOutOfRangeError` from `lset`.
- `CountError` and `MinIntError` for a bad count.
- `ValueError` from `lrange` for a bad range.

### `nutkv.index`

`Index` maps bucket names to `List` structures. It has `get_list`,
`add_list`, `delete_list`, `range_list` and `handle_list_bucket`.

### `nutkv.ds.set`

`Set` keeps sets of byte strings by key. It has `sadd`, `srem`, `shas_key`,
`spop`, `scard`, `sis_member`, `sare_members`, `smembers`, `smove`,
`sdiff`, `sinter` and `sunion`.

### `nutkv.ds.zset`

`SortedSet` is a sorted set backed by a skip list. Members are ordered by
score, then by key. Each member is a `SortedSetNode` with `key()`,
`score()` and `value`.

Methods:

- `put`, `remove`, `get_by_key`
- `peek_min`, `peek_max`, `pop_min`, `pop_max`
- `get_by_rank`, `get_by_rank_range`: ranks start at 1, and negative ranks
  count from the end.
- `get_by_score_range`: takes an optional `GetByScoreRangeOptions` with
  `limit`, `exclude_start` and `exclude_end`.
- `find_rank`, `find_rev_rank`
- `size`

## Examples

```python
from nutkv.entry import Entry, MetaData

meta = MetaData(key_size=3, value_size=3, bucket_size=1, timestamp=1, flag=1)
entry = Entry(key=b"foo", value=b"bar", bucket=b"b", meta=meta)
record = entry.encode()
assert len(record) == entry.size()
```

```python
from nutkv.ds.list import List

items = List()
items.rpush("queue", b"a", b"b")
items.lpush("queue", b"z")
assert items.lrange("queue", 0, -1) == [b"z", b"a", b"b"]
```

```python
from nutkv.ds.zset import SortedSet

board = SortedSet()
board.put("alice", 10, b"a")
board.put("bob", 20, b"b")
assert board.peek_max().key() == "bob"
assert board.find_rank("alice") == 1
```

## What this package does not do

These are parts of a store, not a database you can open. The package has
none of the following:

- a database object
- transactions
- data files, merging or recovery on start-up
- an index for plain key/value buckets
- a command-line tool

The list, set and sorted-set structures live only in memory.

## Tests

The `test` extra installs pytest. The tests are in `tests/`.