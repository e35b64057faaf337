""" Callback registry backing the observable event streams of a session:
    connection state changes, raw frames, log entries, notifications, and
    so on. Callbacks are held by weak reference, so that registering a
    bound method does not keep its owner alive.
"""

import logging
import threading
import weakref


log = logging.getLogger(__name__)


def ref(thing):
    """ Return a weak reference to the supplied argument, regardless of
        whether it is a simple object or a bound method.
    """

    try:
        thing.__func__
        thing.__self__
    except AttributeError:
        return weakref.ref(thing)
    else:
        return weakref.WeakMethod(thing)



class Registry:
    """ A set of named event streams. Any number of callbacks may be
        registered against a stream name; :func:`emit` invokes each of them
        in registration order with the positional arguments provided.

        A callback raising an exception is logged and does not prevent the
        remaining callbacks from being invoked.
    """

    def __init__(self, names=None):

        if names is None:
            self.names = None
        else:
            self.names = frozenset(names)

        self.callbacks = dict()
        self._lock = threading.Lock()


    def register(self, name, method):
        """ Register *method* to be invoked whenever an event named *name*
            is emitted. The caller is responsible for keeping *method* alive;
            only a weak reference is retained here.
        """

        if callable(method):
            pass
        else:
            raise TypeError('the registered method must be callable')

        if self.names is not None and name not in self.names:
            raise ValueError('unknown event stream: ' + repr(name))

        reference = ref(method)

        with self._lock:
            self.callbacks.setdefault(name, list()).append(reference)


    def emit(self, name, *args):
        """ Invoke every live callback registered for *name*. Returns the
            number of callbacks invoked.
        """

        with self._lock:
            references = list(self.callbacks.get(name, ()))

        if references:
            pass
        else:
            return 0

        invalid = list()
        invoked = 0

        for reference in references:
            callback = reference()

            if callback is None:
                invalid.append(reference)
                continue

            invoked += 1

            try:
                callback(*args)
            except Exception:
                log.exception('callback for %r event failed', name)
                continue

        if invalid:
            with self._lock:
                current = self.callbacks.get(name, [])
                for reference in invalid:
                    try:
                        current.remove(reference)
                    except ValueError:
                        pass

        return invoked


    def count(self, name):
        """ Return the number of live callbacks registered for *name*.
        """

        with self._lock:
            references = list(self.callbacks.get(name, ()))

        live = 0
        for reference in references:
            if reference() is not None:
                live += 1

        return live


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
