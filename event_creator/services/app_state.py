"""
Application state store.

Holds the event list and navigation state of one interactive session. All
changes go through ``reduce``; each action maps onto an aggregate operation.
"""

from datetime import datetime
from typing import Annotated, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, Field

from event_creator.schemas.event import FieldUpdate
from event_creator.schemas.guest import GuestCreate, GuestDraft, RSVPStatus
from event_creator.services import event_aggregate as aggregate
from event_creator.services.event_aggregate import EventAggregate

View = Literal[
    "landing", "login", "ai-generator", "manual-creator", "preview",
    "guest-view", "dashboard", "editor", "detail", "rsvp",
]


class AppState(BaseModel):
    events: Tuple[EventAggregate, ...] = ()
    selected_event_id: Optional[str] = None
    view: View = "landing"

    class Config:
        frozen = True

    @property
    def selected_event(self) -> Optional[EventAggregate]:
        return next((e for e in self.events if e.id == self.selected_event_id), None)


class EventCreated(BaseModel):
    type: Literal["event_created"] = "event_created"
    event: EventAggregate

class EventUpdated(BaseModel):
    type: Literal["event_updated"] = "event_updated"
    event_id: str
    changes: List[FieldUpdate]

class EventDeleted(BaseModel):
    type: Literal["event_deleted"] = "event_deleted"
    event_id: str

class GuestAdded(BaseModel):
    type: Literal["guest_added"] = "guest_added"
    event_id: str
    guest: GuestCreate

class GuestRemoved(BaseModel):
    type: Literal["guest_removed"] = "guest_removed"
    event_id: str
    guest_id: str

class GuestResponded(BaseModel):
    type: Literal["guest_responded"] = "guest_responded"
    event_id: str
    guest_id: str
    status: RSVPStatus
    at: Optional[datetime] = None

class PublishToggled(BaseModel):
    type: Literal["publish_toggled"] = "publish_toggled"
    event_id: str

class GuestsImported(BaseModel):
    type: Literal["guests_imported"] = "guests_imported"
    event_id: str
    guests: List[GuestDraft]

class ViewChanged(BaseModel):
    type: Literal["view_changed"] = "view_changed"
    view: View
    event_id: Optional[str] = None

Action = Annotated[
    Union[
        EventCreated, EventUpdated, EventDeleted, GuestAdded, GuestRemoved,
        GuestResponded, PublishToggled, GuestsImported, ViewChanged,
    ],
    Field(discriminator="type"),
]


def _replace_event(state: AppState, event_id: str, change) -> AppState:
    """Apply ``change`` to one event; unknown ids leave the state untouched"""
    events = []
    found = False
    for event in state.events:
        if event.id == event_id:
            event = change(event)
            found = True
        events.append(event)
    if not found:
        return state
    return state.model_copy(update={"events": tuple(events)})


def reduce(state: AppState, action: Action) -> AppState:
    if isinstance(action, EventCreated):
        return state.model_copy(update={
            "events": state.events + (action.event,),
            "selected_event_id": action.event.id,
            "view": "preview",
        })

    if isinstance(action, EventUpdated):
        return _replace_event(
            state, action.event_id, lambda e: aggregate.apply_updates(e, action.changes)
        )

    if isinstance(action, EventDeleted):
        if not any(e.id == action.event_id for e in state.events):
            return state
        remaining = tuple(e for e in state.events if e.id != action.event_id)
        selected = None if state.selected_event_id == action.event_id else state.selected_event_id
        return state.model_copy(update={
            "events": remaining,
            "selected_event_id": selected,
            "view": "dashboard",
        })

    if isinstance(action, GuestAdded):
        return _replace_event(
            state, action.event_id, lambda e: aggregate.add_guest(e, action.guest, require_email=True)
        )

    if isinstance(action, GuestRemoved):
        return _replace_event(
            state, action.event_id, lambda e: aggregate.remove_guest(e, action.guest_id)
        )

    if isinstance(action, GuestResponded):
        return _replace_event(
            state,
            action.event_id,
            lambda e: aggregate.set_guest_status(e, action.guest_id, action.status, now=action.at),
        )

    if isinstance(action, PublishToggled):
        return _replace_event(state, action.event_id, aggregate.toggle_publish)

    if isinstance(action, GuestsImported):
        return _replace_event(
            state, action.event_id, lambda e: aggregate.merge_imported_guests(e, action.guests)
        )

    if isinstance(action, ViewChanged):
        update = {"view": action.view}
        if any(e.id == action.event_id for e in state.events):
            update["selected_event_id"] = action.event_id
        return state.model_copy(update=update)

    raise TypeError(f"Unsupported action: {type(action).__name__}")
