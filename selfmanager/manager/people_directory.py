"""People directory: contacts, their skills and how they know each other."""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable

from selfmanager.core.exceptions import ValidationError
from selfmanager.core.logger import selfmanager_logger as logger
from selfmanager.storage.data_models.person import Person, PersonConnection, PersonSkill
from selfmanager.storage.store_set import StoreSet
from selfmanager.utils.dates import now_iso
from selfmanager.utils.identifiers import new_id

EDITABLE_PERSON_FIELDS = frozenset(
    {
        'name',
        'mobile',
        'email',
        'linkedin_url',
        'facebook_url',
        'whatsapp_url',
        'notes',
        'helpfulness_rating',
        'tags',
        'skills',
    }
)


def _directory_order(people: Iterable[Person]) -> list[Person]:
    """Most helpful first, unrated last, then newest first."""
    by_newest = sorted(people, key=lambda p: p.created_at, reverse=True)
    return sorted(
        by_newest,
        key=lambda p: (p.helpfulness_rating is None, -(p.helpfulness_rating or 0)),
    )


def _skills(skills: Iterable[PersonSkill | dict] | None) -> list[PersonSkill]:
    result = []
    for skill in skills or []:
        if isinstance(skill, dict):
            skill = PersonSkill(
                skill_name=(skill.get('skill_name') or '').strip(),
                skill_level=skill.get('skill_level') or 'intermediate',
            )
        result.append(skill)
    return result


class PeopleDirectory:
    def __init__(self, stores: StoreSet):
        self.people = stores.people
        self.connections = stores.people_connections

    def list_people(self) -> list[Person]:
        return _directory_order(self.people.all())

    def search_people(self, query: str) -> list[Person]:
        """People whose name or notes contain ``query``, case-insensitively."""
        needle = (query or '').strip().lower()
        if not needle:
            return self.list_people()
        return _directory_order(
            p for p in self.people.all()
            if needle in p.name.lower() or needle in p.notes.lower()
        )

    def people_with_skill(self, skill_name: str) -> list[Person]:
        wanted = (skill_name or '').strip().lower()
        return _directory_order(
            p for p in self.people.all()
            if any(s.skill_name.lower() == wanted for s in p.skills)
        )

    async def create_person(
        self,
        name: str,
        skills: Iterable[PersonSkill | dict] | None = None,
        tags: Iterable[str] | None = None,
        **details,
    ) -> Person:
        unknown = set(details) - EDITABLE_PERSON_FIELDS
        if unknown:
            raise ValidationError(f'Unknown person field(s): {", ".join(sorted(unknown))}')
        person = Person(
            id=new_id(),
            name=(name or '').strip(),
            tags=[t for t in tags or [] if t],
            skills=_skills(skills),
            **details,
        )
        await self.people.save(person)
        logger.info(f'Added person {person.id}')
        return person

    async def update_person(self, person_id: str, **changes) -> Person:
        """Apply field changes; a ``skills`` list replaces the old one."""
        person = self.people.require(person_id)
        unknown = set(changes) - EDITABLE_PERSON_FIELDS
        if unknown:
            raise ValidationError(f'Cannot update person field(s): {", ".join(sorted(unknown))}')
        if 'skills' in changes:
            changes['skills'] = _skills(changes['skills'])
        if 'name' in changes:
            changes['name'] = (changes['name'] or '').strip()
        return await self.people.save(replace(person, updated_at=now_iso(), **changes))

    async def delete_person(self, person_id: str) -> bool:
        """Delete a person and every connection they are part of."""
        for connection in self.connections.involving(person_id):
            await self.connections.delete(connection.id)
        return await self.people.delete(person_id)

    def connections_for(self, person_id: str) -> list[tuple[PersonConnection, Person]]:
        """Each connection of a person, paired with the person on the other end."""
        result = []
        for connection in self.connections.involving(person_id):
            other_id = (
                connection.person_b_id
                if connection.person_a_id == person_id
                else connection.person_a_id
            )
            other = self.people.get(other_id)
            if other is not None:
                result.append((connection, other))
        return result

    async def add_connection(
        self,
        person_a_id: str,
        person_b_id: str,
        relationship_type: str = 'other',
        relationship_notes: str = '',
    ) -> PersonConnection:
        self.people.require(person_a_id)
        self.people.require(person_b_id)
        connection = PersonConnection(
            id=new_id(),
            person_a_id=person_a_id,
            person_b_id=person_b_id,
            relationship_type=relationship_type,
            relationship_notes=relationship_notes or '',
        )
        return await self.connections.save(connection)

    async def delete_connection(self, connection_id: str) -> bool:
        return await self.connections.delete(connection_id)
