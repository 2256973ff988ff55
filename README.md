# sorkinbot

The domain core of a chat bot that books clinic appointments. The package holds
the business rules. The caller passes in storage, the clinic's information
system and the bot as plain objects. Each of these objects only needs the
methods described by the `Protocol` classes in the modules.

## Modules

- `sorkinbot.entities` holds the domain dataclasses. These are `User`,
  `Appointment`, `DraftAppointment`, `Doctor`, `Schedule`, `SchedulePeriod`,
  `Speciality`, `Translation`, `Message` and `MessageLog`. There is also the
  `AppointmentType` enum (`ONLINE`, `CLINIC`, `HOME`).
  - `Appointment.date()`, `time_start_short()` and `time_end_short()` split
    `"dd.mm.yyyy hh:mm"` timestamps.
  - `SchedulePeriod.day()` turns its `"dd.mm.yyyy"` date into a `datetime.date`.
- `sorkinbot.mapping` works on integer-keyed dicts.
  - `sorted_int_map` orders a dict by key.
  - `int_map_with_offset` skips the first `offset` keys in key order.
- `sorkinbot.cache.TTLCache` is a thread-safe key-value store.
  - Each entry has its own time to live.
  - A daemon thread calls `purge_expired()` every `clean_period` seconds.
  - `get` does not check expiry. An entry stays readable until the next purge.
  - `close()` stops the cleaner. The cache also works as a context manager.
- `sorkinbot.worker_pool` runs periodic tasks on threads.
  - `Worker(task, interval).start(stop_event)` calls `task.process()` after
    every interval and logs any exception it raises.
  - `WorkerPool(workers).run(stop_event)` starts each worker on a daemon
    thread and returns the threads.
- `sorkinbot.usecases.appointment` holds single-purpose actions on a user's
  draft appointment, each with one `execute` method:
  - `CreateDraftAppointment`
  - `CleanDraftAppointment`
  - `UpdateAppointmentDate`
  - `UpdateAppointmentStatus`
  - `UpdateIntAppointmentField`
  - `UpdateStrAppointmentField`
  - `FastUpdateDraftAppointment`
- `sorkinbot.usecases.messages.SaveMessageLog` stores a message log entry.
- `sorkinbot.usecases.users` holds single-purpose actions on users:
  - `CreateUser`
  - `ChangeLanguage`
  - `ChangeState`
  - `UpdateUserPhone`
  - `UpdateUserPatientId`
  - `UpdateUserHomeAddress`
  - `UpdateUserBirthDate`
  - `UpdateUserFullName`: splits `"Name Surname"` and stores `"."` as the
    third name.
- `sorkinbot.services.user` handles registering users and changing their
  details.
  - `UserService` updates a user only when the new value passes
    `is_valid_phone`, `is_valid_full_name` or `is_valid_birth_date`.
  - Its update methods return `(user, stored)`.
- `sorkinbot.services.message.MessageService` returns stored messages and
  weekday names in the user's language (`"RU"`, `"EN"`, `"PT"`). It uses
  English when the user has no language. It raises `TranslationError` for an
  unknown language code.
- `sorkinbot.services.adapter.AppointmentServiceAdapter` sits in front of a
  `Gateway` to the clinic system.
  - It caches appointments, doctors, schedules and specialities in a
    `TTLCache`.
  - It builds `CreateAppointmentRequest` and `PatientRequest` objects for the
    gateway.
- `sorkinbot.services.appointment_core.AppointmentCore` covers booking,
  cancelling and confirming appointments, drafts, patient registration and
  speciality translation.
  - `translation_text` picks a translation's text for a language code.
  - `convert_callback_times` turns
    `doctorId_<id>__timeStart_<yyyy-mm-dd hh:mm>__timeEnd_<...>` into two
    `"dd.mm.yyyy hh:mm"` strings.
- `sorkinbot.services.appointment.AppointmentService` extends the core. It adds
  paged doctor lists, doctor details, the fast-appointment pick (up to six
  random doctors), a doctor's slots for a day, the working days of a month and
  home-visit slots.
- `sorkinbot.state_machine.UserStateMachine` holds the allowed moves through
  the booking dialogue.
  - The moves are listed in `TRANSITIONS`, with state names such as `START`
    and `CHOOSE_LANGUAGE`.
  - `can(event)` and `fire(event)` check and make a move. `fire` raises
    `InvalidTransition`.
  - `set_state(user, to)` stores a user's state through the user service.
- `sorkinbot.tasks` holds two periodic checks that message the administrator:
  - `SpecialityTranslationCheckTask` reports untranslated specialities.
  - `SupportCallsCheckTask` reports recent `/tech_support` calls.
  - When no value is given to the constructor, both read `ADMIN_ID` from the
    environment. `SupportCallsCheckTask` also reads `DEFAULT_CHECK_SUPPORT`.

## What the package does not do

The package has no database layer, no Telegram client, no webhook or HTTP
server, no concrete gateway to the clinic system and no command-line program.
The caller supplies the storage, gateway and bot objects, and runs the
services and tasks from their own application.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Example

```python
import threading

from sorkinbot.cache import TTLCache
from sorkinbot.mapping import int_map_with_offset
from sorkinbot.state_machine import CHOOSE_LANGUAGE, UserStateMachine
from sorkinbot.worker_pool import Worker, WorkerPool

print(int_map_with_offset({3: "c", 1: "a", 2: "b"}, 1))  # {2: 'b', 3: 'c'}

with TTLCache(clean_period=10.0) as cache:
    cache.set("doctors", ["Dr. House"], ttl=60.0)
    print(cache.get("doctors"))

machine = UserStateMachine(user_service=None)
print(machine.can(CHOOSE_LANGUAGE), machine.fire(CHOOSE_LANGUAGE))  # True chooseLanguage


class Ping:
    def process(self):
        print("ping")


stop = threading.Event()
WorkerPool([Worker(Ping(), interval=1.0)]).run(stop)
# ... later
stop.set()
```