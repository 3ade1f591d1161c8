"""Exceptions which the data model and the mapping engines throw to indicate
standard types of problem.
"""


class ArchitectureError(Exception):
    """Indication that an architecture model was constructed incorrectly, for
    example a link was made between ports of the wrong class or a port was
    connected to more than one link.
    """
    pass


class TaskgraphError(Exception):
    """Indication that a taskgraph is malformed, for example an edge refers to
    a task which does not exist.
    """
    pass


class InsufficientResourceError(Exception):
    """Indication that an initial placement could not be made because there
    are more tasks of some class than locations they may occupy.
    """
    pass


class NoLegalLocationError(Exception):
    """Raised when some equivalence class of tasks has no location in the
    architecture it may be mapped to.

    Attributes
    ----------
    task : str
        The name of a task belonging to the offending class.
    cls : int
        The equivalence class number.
    """

    def __init__(self, task, cls):
        self.task = task
        self.cls = cls

    def __str__(self):
        return ("No legal location exists for task {0.task!r} "
                "(equivalence class {0.cls}).".format(self))


class UnroutableChannelError(Exception):
    """Raised when a channel can never be routed, irrespective of congestion.

    Attributes
    ----------
    edge : int
        The index of the taskgraph edge the channel implements.
    reason : "start", "stop" or "path"
        "start" and "stop" indicate that no legal start (or stop) port was
        found for one of the channel's tasks. "path" indicates that no path
        exists through the routing resources between the channel's start and
        stop ports.
    task : str or None
        The task whose ports were found wanting (when applicable).
    """

    def __init__(self, edge, reason, task=None):
        self.edge = edge
        self.reason = reason
        self.task = task

    def __str__(self):
        if self.reason == "path":
            return ("No path exists through the architecture for "
                    "taskgraph edge {0.edge}.".format(self))
        else:
            return ("Taskgraph edge {0.edge} has no legal {0.reason} port "
                    "on task {0.task!r}.".format(self))
