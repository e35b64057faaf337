""" Local record of submitted jobs and their last known lifecycle state.
    Jobs are created when a document is submitted and are only ever moved
    forward: Pending, then Acknowledged, then one of the terminal states.
    Nothing is ever removed from the ledger.
"""

import enum
import itertools
import logging
import threading
import time

from .protocol import message


log = logging.getLogger(__name__)


class JobStatus(enum.Enum):

    PENDING = 'pending'
    ACKNOWLEDGED = 'acknowledged'
    SUCCEEDED = 'succeeded'
    FAILED = 'failed'

    @property
    def terminal(self):
        return self in (JobStatus.SUCCEEDED, JobStatus.FAILED)



class Job:
    """ One submitted print job.

        :ivar id: Identifier, unique within the session.
        :ivar document: The document submitted, as provided by the caller.
        :ivar submitted_at: UNIX epoch timestamp of the submission.
        :ivar status: The current :class:`JobStatus`.
        :ivar last_message: The most recent message from the daemon, if any.
    """

    def __init__(self, id, document, submitted_at=None):

        if submitted_at is None:
            submitted_at = time.time()

        self.id = id
        self.document = document
        self.submitted_at = submitted_at
        self.status = JobStatus.PENDING
        self.last_message = None
        self.updated_at = submitted_at


    def __repr__(self):
        return 'Job(%r, %s)' % (self.id, self.status.name)


    @property
    def terminal(self):
        return self.status.terminal


    def _transition(self, status, message=None):
        self.status = status
        if message is not None:
            self.last_message = message
        self.updated_at = time.time()


# end of class Job



class Ledger:
    """ The set of jobs submitted in this session, keyed by identifier.

        Identifiers are drawn from a monotonic counter combined with the
        ledger's creation time in milliseconds (the *epoch*), for example
        ``job-1737050000000-1``. The counter alone guarantees uniqueness
        within a session, no matter how many jobs are created within the
        same clock tick; the epoch keeps identifiers from different sessions
        apart.
    """

    def __init__(self, epoch=None):

        if epoch is None:
            epoch = int(time.time() * 1000)

        self.epoch = int(epoch)

        self._jobs = dict()
        self._lock = threading.Lock()
        self._ticker = itertools.count(1)


    def __contains__(self, job_id):
        return job_id in self._jobs


    def __len__(self):
        return len(self._jobs)


    def __getitem__(self, job_id):
        return self._jobs[job_id]


    def next_id(self, prefix='job'):
        """ Return the next locally unique job identifier.
        """

        with self._lock:
            number = next(self._ticker)

        return '%s-%d-%d' % (prefix, self.epoch, number)


    def submit(self, document, prefix='job'):
        """ Record a new Pending job for *document* and return its identifier.
        """

        job_id = self.next_id(prefix)
        job = Job(job_id, document)

        with self._lock:
            self._jobs[job_id] = job

        log.debug('job %s recorded', job_id)
        return job_id


    def bulk_submit(self, document, count, prefix='burst'):
        """ Record *count* new Pending jobs for the same *document*, as for
            a burst submission, and return their identifiers in order.
        """

        count = int(count)
        if count < 0:
            raise ValueError('job count cannot be negative')

        job_ids = list()
        for index in range(count):
            job_ids.append(self.submit(document, prefix))

        return job_ids


    def get(self, job_id, default=None):
        return self._jobs.get(job_id, default)


    def jobs(self):
        """ Return every job, in submission order.
        """

        with self._lock:
            return list(self._jobs.values())


    def counts(self):
        """ Return a dictionary mapping each :class:`JobStatus` to the number
            of jobs currently in that state.
        """

        counts = dict()
        for status in JobStatus:
            counts[status] = 0

        for job in self.jobs():
            counts[job.status] += 1

        return counts


    def apply(self, event):
        """ Apply the single transition implied by an inbound *event*: an
            :class:`~ticketclient.protocol.message.Ack` moves a Pending job
            to Acknowledged, a :class:`~ticketclient.protocol.message.Result`
            moves a non-terminal job to Succeeded or Failed. Every other
            event, an unknown job identifier, or a job already past the
            implied state is a no-op.

            Returns the updated :class:`Job`, or None if nothing changed.
        """

        if isinstance(event, message.Ack):
            allowed = (JobStatus.PENDING,)
            status = JobStatus.ACKNOWLEDGED
        elif isinstance(event, message.Result):
            allowed = (JobStatus.PENDING, JobStatus.ACKNOWLEDGED)
            if event.succeeded:
                status = JobStatus.SUCCEEDED
            else:
                status = JobStatus.FAILED
        else:
            return None

        return self._move(event.id, allowed, status, event.message)


    def fail(self, job_id, message=None):
        """ Mark a non-terminal job as Failed locally, for example when its
            submission frame could not be sent.
        """

        allowed = (JobStatus.PENDING, JobStatus.ACKNOWLEDGED)
        return self._move(job_id, allowed, JobStatus.FAILED, message)


    def _move(self, job_id, allowed, status, message):

        with self._lock:
            try:
                job = self._jobs[job_id]
            except (KeyError, TypeError):
                log.debug('ignoring %s for unknown job %r', status.name, job_id)
                return None

            if job.status in allowed:
                job._transition(status, message)
            else:
                log.debug('ignoring %s for job %s, already %s', status.name, job_id, job.status.name)
                return None

        return job


# end of class Ledger


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
