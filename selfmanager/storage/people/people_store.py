"""Stores for people and the connections between them.

Skills are kept on the person row as a list of
``{"skill_name", "skill_level"}`` objects.
"""

from __future__ import annotations

from selfmanager.core.exceptions import ValidationError
from selfmanager.storage.backend.table_backend import Row
from selfmanager.storage.data_models.person import (
    RELATIONSHIP_TYPES,
    SKILL_LEVELS,
    Person,
    PersonConnection,
    PersonSkill,
)
from selfmanager.storage.entity_store import EntityStore
from selfmanager.utils.dates import now_iso


def _dict_to_skill(data: dict) -> PersonSkill:
    level = data.get('skill_level') or 'intermediate'
    return PersonSkill(skill_name=data['skill_name'], skill_level=level)


def _skill_to_dict(skill: PersonSkill) -> dict:
    return {'skill_name': skill.skill_name, 'skill_level': skill.skill_level}


class PeopleStore(EntityStore[Person]):
    table = 'people'
    entity_name = 'person'
    label_field = 'name'

    def _validate(self, person: Person) -> None:
        super()._validate(person)
        rating = person.helpfulness_rating
        if rating is not None and (isinstance(rating, bool) or not 0 <= rating <= 5):
            raise ValidationError('Helpfulness rating must be between 0 and 5')
        for skill in person.skills:
            if not skill.skill_name.strip():
                raise ValidationError('Skill name cannot be empty')
            if skill.skill_level not in SKILL_LEVELS:
                raise ValidationError(f'Invalid skill level: {skill.skill_level}')

    def _to_row(self, person: Person) -> Row:
        return {
            'id': person.id,
            'name': person.name,
            'mobile': person.mobile,
            'email': person.email,
            'linkedin_url': person.linkedin_url,
            'facebook_url': person.facebook_url,
            'whatsapp_url': person.whatsapp_url,
            'notes': person.notes,
            'helpfulness_rating': person.helpfulness_rating,
            'tags': list(person.tags),
            'skills': [_skill_to_dict(s) for s in person.skills],
            'created_at': person.created_at,
            'updated_at': person.updated_at,
        }

    def _from_row(self, row: Row) -> Person:
        rating = row.get('helpfulness_rating')
        created_at = row.get('created_at') or now_iso()
        return Person(
            id=row['id'],
            name=row['name'],
            mobile=row.get('mobile'),
            email=row.get('email'),
            linkedin_url=row.get('linkedin_url'),
            facebook_url=row.get('facebook_url'),
            whatsapp_url=row.get('whatsapp_url'),
            notes=row.get('notes') or '',
            helpfulness_rating=int(rating) if rating is not None else None,
            tags=list(row.get('tags') or []),
            skills=[_dict_to_skill(s) for s in row.get('skills') or []],
            created_at=created_at,
            updated_at=row.get('updated_at') or created_at,
        )


class ConnectionsStore(EntityStore[PersonConnection]):
    table = 'people_connections'
    entity_name = 'connection'
    label_field = None

    def _validate(self, connection: PersonConnection) -> None:
        if not connection.person_a_id or not connection.person_b_id:
            raise ValidationError('A connection needs two people')
        if connection.person_a_id == connection.person_b_id:
            raise ValidationError('A person cannot be connected to themselves')
        if connection.relationship_type not in RELATIONSHIP_TYPES:
            raise ValidationError(f'Invalid relationship type: {connection.relationship_type}')

    def involving(self, person_id: str) -> list[PersonConnection]:
        return [
            c for c in self.all()
            if person_id in (c.person_a_id, c.person_b_id)
        ]

    def _to_row(self, connection: PersonConnection) -> Row:
        return {
            'id': connection.id,
            'person_a_id': connection.person_a_id,
            'person_b_id': connection.person_b_id,
            'relationship_type': connection.relationship_type,
            'relationship_notes': connection.relationship_notes,
            'created_at': connection.created_at,
        }

    def _from_row(self, row: Row) -> PersonConnection:
        return PersonConnection(
            id=row['id'],
            person_a_id=row['person_a_id'],
            person_b_id=row['person_b_id'],
            relationship_type=row.get('relationship_type') or 'other',
            relationship_notes=row.get('relationship_notes') or '',
            created_at=row.get('created_at') or now_iso(),
        )
