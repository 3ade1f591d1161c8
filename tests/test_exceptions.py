from archmap.exceptions import NoLegalLocationError, UnroutableChannelError


def test_no_legal_location_error():
    e = NoLegalLocationError("task7", 3)
    assert e.task == "task7"
    assert e.cls == 3
    assert "task7" in str(e)
    assert "3" in str(e)


def test_unroutable_channel_error():
    e = UnroutableChannelError(4, "start", "a")
    assert (e.edge, e.reason, e.task) == (4, "start", "a")
    assert "4" in str(e)
    assert "start" in str(e)
    assert "'a'" in str(e)

    e = UnroutableChannelError(2, "path")
    assert "No path" in str(e)
    assert "2" in str(e)
