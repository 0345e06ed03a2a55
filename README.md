# accessgate

Building blocks for role-based access control:

- **Role managers** (`accessgate.role_manager`) that track which users inherit
  which roles, optionally per domain, with pattern matching for role and
  domain names and a limit on how deep inheritance is followed.
- **Conditional role managers** (`accessgate.conditional`), whose links only
  count while a condition function attached to them returns true.
- **Policy storage** (`accessgate.persist`): `PolicyModel`, a store of rules
  grouped by section and policy type, and `load_policy_line` /
  `load_policy_array`, which parse rules into it and skip duplicates.
- **Policy adapters** that load rules from, and save them to, CSV-style text
  files (`accessgate.file_adapter`) or in-memory strings
  (`accessgate.string_adapter`), including filtered loading from files.
- **Interfaces** (`Adapter`, `BatchAdapter`, `FilteredAdapter`,
  `UpdatableAdapter`, `Dispatcher`, `Watcher`, `WatcherEx`,
  `UpdatableWatcher` in `accessgate.persist`, and `RoleManagerBase`,
  `ConditionalRoleManagerBase` in `accessgate.rbac`) for plugging in your own
  storage, change notification and role management.
- **Decision caches** (`accessgate.cache`) with optional expiry, in plain and
  thread-safe forms.

## Installation

```
pip install accessgate
```

## Role managers

```python
from accessgate.role_manager import RoleManager

rm = RoleManager(10)
rm.add_link("alice", "editor")
rm.add_link("editor", "admin")

rm.has_link("alice", "admin")   # True
rm.get_roles("alice")           # ["editor"]
rm.get_users("editor")          # ["alice"]
```

The number given to the constructor is the maximum hierarchy level: how many
links `has_link` follows before giving up.

Pass a domain as an extra argument to keep role trees apart:

```python
rm.add_link("bob", "admin", "domain1")
rm.has_link("bob", "admin", "domain1")  # True
rm.has_link("bob", "admin", "domain2")  # False
rm.get_all_domains()                    # ["", "domain1"]
```

`add_matching_func` and `add_domain_matching_func` accept any function of two
strings (a name and a pattern) returning a boolean, so a role such as
`"/book/*"` or a domain such as `"*"` can stand for many names. Existing links
are rebuilt when a matching function is added.

`RoleManagerImpl` is the single-domain manager used inside each domain.
`print_roles()` writes every link at INFO level to the `accessgate.rbac`
logger (or the one given to `set_logger`). `build_relationship` is deprecated
and only issues a `DeprecationWarning`.

## Conditional links

```python
from accessgate.conditional import ConditionalRoleManager

crm = ConditionalRoleManager(10)
crm.add_link("alice", "night_shift")
crm.add_link_condition_func("alice", "night_shift", lambda *params: params == ("on",))
crm.set_link_condition_func_params("alice", "night_shift", "on")
crm.has_link("alice", "night_shift")  # True
```

A condition function receives the parameters set for its link. If it returns
false the link is not followed; if it raises, the error is logged and the
links leaving that role are not followed. `ConditionalDomainManager` keeps one
conditional manager per domain; its `add_link_condition_func` and
`set_link_condition_func_params` apply to every domain that already exists.

## Policy storage and adapters

```python
from accessgate.persist import PolicyModel, load_policy_line
from accessgate.string_adapter import StringAdapter
from accessgate.file_adapter import FileAdapter, FilteredFileAdapter, Filter

model = PolicyModel()
StringAdapter("p, alice, data1, read\ng, alice, admin").load_policy(model)
load_policy_line("p, bob, data2, write", model)
list(model.iter_policies("p"))  # [("p", ["alice", "data1", "read"]), ("p", ["bob", "data2", "write"])]

FileAdapter("policy.csv").save_policy(model)

filtered = FilteredFileAdapter("policy.csv")
filtered.load_filtered_policy(PolicyModel(), Filter(p=["alice"]))
filtered.is_filtered()  # True
```

Saving writes all `p` rules, then all `g` rules, one per line as
`ptype, field, field, ...`. Empty lines and lines starting with `#` are
ignored when loading.

A `Filter` lists, per policy type (`p`, `g`, `g1` … `g5`), the field values a
rule must have; empty values match anything. A filtered adapter refuses to
save (`RuntimeError`), so that a partial policy never overwrites the full one.

The file and string adapters only load and save whole policies. Incremental
operations such as `add_policy` or `update_policy` raise
`UnsupportedOperationError`, except `StringAdapter.remove_policy`, which
empties the stored text.

## Caches

```python
from accessgate.cache import SyncCache, NoSuchKeyError

cache = SyncCache()
cache.set("alice,data1,read", True, 30.0)
cache.get("alice,data1,read")  # True
```

The time to live is given in seconds or as a `timedelta`; `None` or a value of
zero or less never expires. A missing or expired key raises `NoSuchKeyError`.
`DefaultCache` is the same without locking.

## What this package does not do

It does not decide access requests. There is no enforcer, no parser for model
definitions and no evaluation of matcher expressions or policy effects:
`PolicyModel` only stores rules. The watcher and dispatcher types are
interfaces only; no implementation that talks to other processes is included.
There is no command-line tool.

## Running the tests

```
pip install -e ".[test]"
pytest
```