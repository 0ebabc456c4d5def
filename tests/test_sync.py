from TutorDesk.core.sync import ChangeBus


def test_publish_emits_locally(qapp):
    bus = ChangeBus()
    seen = []
    bus.subscribe(seen.append)
    bus.publish("students")
    assert seen == ["students"]


def test_publish_writes_stamp(qapp, tmp_path):
    stamp = tmp_path / "tutordesk.sync"
    bus = ChangeBus(stamp_path=stamp)
    bus.publish("schedules")
    assert stamp.read_text(encoding="utf-8") == f"{bus.instance_id} schedules"


def test_foreign_stamp_becomes_external_change(qapp, tmp_path):
    stamp = tmp_path / "tutordesk.sync"
    mine = ChangeBus(stamp_path=stamp)
    theirs = ChangeBus(stamp_path=stamp)
    external = []
    mine.subscribe_external(external.append)

    theirs.publish("teacher_payments")
    mine._on_stamp_changed(str(stamp))
    assert external == ["teacher_payments"]


def test_own_stamp_is_ignored(qapp, tmp_path):
    stamp = tmp_path / "tutordesk.sync"
    bus = ChangeBus(stamp_path=stamp)
    external = []
    bus.subscribe_external(external.append)
    bus.publish("students")
    bus._on_stamp_changed(str(stamp))
    assert external == []


def test_malformed_stamp_is_ignored(qapp, tmp_path):
    stamp = tmp_path / "tutordesk.sync"
    bus = ChangeBus(stamp_path=stamp)
    external = []
    bus.subscribe_external(external.append)
    stamp.write_text("garbage", encoding="utf-8")
    bus._on_stamp_changed(str(stamp))
    assert external == []
