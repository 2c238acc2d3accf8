from services.config_schema import DriverDescriptor
from services.db import SqliteDriverRegistry


def _descriptor(name, **fields):
    return DriverDescriptor(name=name, class_name=f"pkg.{name}:Driver", **fields)


def test_add_and_get(registry):
    assert registry.add_driver("redis", _descriptor("redis", category="cache", config={"port": 6379}))

    descriptor = registry.get_driver("redis")
    assert descriptor.name == "redis"
    assert descriptor.class_name == "pkg.redis:Driver"
    assert descriptor.category == "cache"
    assert descriptor.config == {"port": 6379}
    assert descriptor.status == 1
    assert registry.has_driver("redis")


def test_add_accepts_plain_mapping(registry):
    assert registry.add_driver("smtp", {"class": "mail:Smtp", "version": None, "config": {"tls": True}})

    descriptor = registry.get_driver("smtp")
    assert descriptor.class_name == "mail:Smtp"
    assert descriptor.version == "1.0.0"
    assert descriptor.title == "smtp"
    assert descriptor.config == {"tls": True}


def test_add_stores_under_given_name(registry):
    registry.add_driver("alias", _descriptor("original"))

    assert registry.has_driver("alias")
    assert not registry.has_driver("original")
    assert registry.get_driver("alias").name == "alias"


def test_upsert_keeps_status(registry):
    registry.add_driver("redis", _descriptor("redis", version="1.0.0"))
    registry.set_driver_status("redis", 0)

    registry.add_driver("redis", _descriptor("redis", version="1.2.0"))

    descriptor = registry.get_driver("redis")
    assert descriptor.version == "1.2.0"
    assert descriptor.status == 0


def test_returned_descriptor_is_a_copy(registry):
    registry.add_driver("redis", _descriptor("redis", config={"port": 6379}))

    registry.get_driver("redis").config["port"] = 1
    registry.get_driver_config("redis")["port"] = 2

    assert registry.get_driver_config("redis") == {"port": 6379}


def test_unknown_names(registry):
    assert registry.get_driver("ghost") is None
    assert not registry.has_driver("ghost")
    assert registry.get_driver_config("ghost") == {}
    assert registry.remove_driver("ghost") is False
    assert registry.save_config("ghost", {"a": 1}) is False
    assert registry.set_driver_status("ghost", 1) is False


def test_save_config_replaces_mapping(registry):
    registry.add_driver("redis", _descriptor("redis", config={"port": 6379, "db": 0}))

    assert registry.save_config("redis", {"port": 6380})
    assert registry.get_driver_config("redis") == {"port": 6380}


def test_remove(registry):
    registry.add_driver("redis", _descriptor("redis"))

    assert registry.remove_driver("redis") is True
    assert not registry.has_driver("redis")


def test_list_filters(registry):
    registry.add_driver("redis", _descriptor("redis", category="cache"))
    registry.add_driver("files", _descriptor("files", category="cache"))
    registry.add_driver("smtp", _descriptor("smtp", category="mail"))
    registry.set_driver_status("files", 0)

    assert [d.name for d in registry.get_drivers_list()] == ["files", "redis", "smtp"]
    assert [d.name for d in registry.get_drivers_list("cache")] == ["files", "redis"]
    assert [d.name for d in registry.get_drivers_list("cache", 1)] == ["redis"]
    assert [d.name for d in registry.get_drivers_list(status=0)] == ["files"]


def test_sqlite_registry_persists_across_connections(tmp_path):
    path = tmp_path / "store" / "drivers.db"
    first = SqliteDriverRegistry(path)
    first.add_driver("redis", _descriptor("redis", config={"hosts": ["a", "b"]}))
    first.set_driver_status("redis", 0)
    first.close()

    second = SqliteDriverRegistry(path)
    try:
        descriptor = second.get_driver("redis")
        assert descriptor.config == {"hosts": ["a", "b"]}
        assert descriptor.status == 0
    finally:
        second.close()


def test_sqlite_registry_defaults_to_data_path(tmp_path):
    registry = SqliteDriverRegistry()
    try:
        assert (tmp_path / "data" / "drivers.db").is_file()
    finally:
        registry.close()


def test_nested_config_is_not_shared_with_callers(registry):
    registry.add_driver("hook", _descriptor("hook", config={"headers": {"a": "1"}}))

    registry.get_driver_config("hook")["headers"]["b"] = "2"

    assert registry.get_driver_config("hook") == {"headers": {"a": "1"}}


def test_saved_config_is_detached_from_caller_mapping(registry):
    registry.add_driver("hook", _descriptor("hook"))
    config = {"routes": {"hosts": ["a"]}}

    registry.save_config("hook", config)
    config["routes"]["hosts"].append("b")

    assert registry.get_driver("hook").config == {"routes": {"hosts": ["a"]}}


def test_added_mapping_is_detached_from_caller(registry):
    data = {"class": "pkg:Driver", "config": {"hosts": ["a"]}}

    registry.add_driver("hook", data)
    data["config"]["hosts"].append("b")

    assert registry.get_driver_config("hook") == {"hosts": ["a"]}
