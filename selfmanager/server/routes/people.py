"""API routes for the people directory."""

from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from selfmanager.core.exceptions import SelfManagerError
from selfmanager.core.logger import selfmanager_logger as logger
from selfmanager.manager.workspace import UserWorkspace
from selfmanager.server.dependencies import get_user_workspace
from selfmanager.storage.data_models.person import Person, PersonConnection

app = APIRouter(prefix='/api')


class SkillModel(BaseModel):
    skill_name: str
    skill_level: str = 'intermediate'


class PersonResponse(BaseModel):
    id: str
    name: str
    mobile: str | None
    email: str | None
    linkedin_url: str | None
    facebook_url: str | None
    whatsapp_url: str | None
    notes: str
    helpfulness_rating: int | None
    tags: list[str]
    skills: list[SkillModel]
    created_at: str
    updated_at: str
    pending_sync: bool = False


class CreatePersonRequest(BaseModel):
    name: str
    mobile: str | None = None
    email: str | None = None
    linkedin_url: str | None = None
    facebook_url: str | None = None
    whatsapp_url: str | None = None
    notes: str = ''
    helpfulness_rating: int | None = None
    tags: list[str] = Field(default_factory=list)
    skills: list[SkillModel] = Field(default_factory=list)


class UpdatePersonRequest(BaseModel):
    name: str | None = None
    mobile: str | None = None
    email: str | None = None
    linkedin_url: str | None = None
    facebook_url: str | None = None
    whatsapp_url: str | None = None
    notes: str | None = None
    helpfulness_rating: int | None = None
    tags: list[str] | None = None
    skills: list[SkillModel] | None = None


class ConnectionResponse(BaseModel):
    id: str
    person_a_id: str
    person_b_id: str
    relationship_type: str
    relationship_notes: str
    created_at: str


class ConnectionWithPersonResponse(BaseModel):
    connection: ConnectionResponse
    person: PersonResponse


class CreateConnectionRequest(BaseModel):
    person_a_id: str
    person_b_id: str
    relationship_type: str = 'other'
    relationship_notes: str = ''


def person_to_response(person: Person, workspace: UserWorkspace) -> PersonResponse:
    return PersonResponse(
        **asdict(person),
        pending_sync=workspace.stores.people.is_pending(person.id),
    )


def connection_to_response(connection: PersonConnection) -> ConnectionResponse:
    return ConnectionResponse(**asdict(connection))


@app.get('/people', response_model=list[PersonResponse])
async def list_people(
    search: str | None = None,
    skill: str | None = None,
    workspace: UserWorkspace = Depends(get_user_workspace),
) -> list[PersonResponse]:
    """Most helpful first; ``search`` matches name or notes, ``skill`` a skill name."""
    if skill:
        people = workspace.people.people_with_skill(skill)
    elif search:
        people = workspace.people.search_people(search)
    else:
        people = workspace.people.list_people()
    return [person_to_response(p, workspace) for p in people]


@app.get('/people/{person_id}', response_model=PersonResponse)
async def get_person(
    person_id: str,
    workspace: UserWorkspace = Depends(get_user_workspace),
) -> PersonResponse:
    return person_to_response(workspace.stores.people.require(person_id), workspace)


@app.post(
    '/people',
    response_model=PersonResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {'description': 'Person added'},
        400: {'description': 'Invalid person'},
        500: {'description': 'Error adding person'},
    },
)
async def create_person(
    request_body: CreatePersonRequest,
    workspace: UserWorkspace = Depends(get_user_workspace),
) -> PersonResponse:
    try:
        person = await workspace.people.create_person(**request_body.model_dump())
        return person_to_response(person, workspace)
    except SelfManagerError:
        raise
    except Exception as e:
        logger.error(f'Error adding person: {e}')
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail='Error adding person',
        )


@app.patch('/people/{person_id}', response_model=PersonResponse)
async def update_person(
    person_id: str,
    request_body: UpdatePersonRequest,
    workspace: UserWorkspace = Depends(get_user_workspace),
) -> PersonResponse:
    changes = request_body.model_dump(exclude_none=True)
    person = await workspace.people.update_person(person_id, **changes)
    return person_to_response(person, workspace)


@app.delete('/people/{person_id}')
async def delete_person(
    person_id: str,
    workspace: UserWorkspace = Depends(get_user_workspace),
) -> JSONResponse:
    existed = await workspace.people.delete_person(person_id)
    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content={'message': f'Person {person_id} deleted', 'existed': existed},
    )


@app.get('/people/{person_id}/connections', response_model=list[ConnectionWithPersonResponse])
async def list_connections(
    person_id: str,
    workspace: UserWorkspace = Depends(get_user_workspace),
) -> list[ConnectionWithPersonResponse]:
    workspace.stores.people.require(person_id)
    return [
        ConnectionWithPersonResponse(
            connection=connection_to_response(connection),
            person=person_to_response(other, workspace),
        )
        for connection, other in workspace.people.connections_for(person_id)
    ]


@app.post(
    '/people/connections',
    response_model=ConnectionResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {'description': 'Invalid connection'},
        404: {'description': 'Person not found'},
    },
)
async def create_connection(
    request_body: CreateConnectionRequest,
    workspace: UserWorkspace = Depends(get_user_workspace),
) -> ConnectionResponse:
    connection = await workspace.people.add_connection(**request_body.model_dump())
    return connection_to_response(connection)


@app.delete('/people/connections/{connection_id}')
async def delete_connection(
    connection_id: str,
    workspace: UserWorkspace = Depends(get_user_workspace),
) -> JSONResponse:
    existed = await workspace.people.delete_connection(connection_id)
    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content={'message': f'Connection {connection_id} deleted', 'existed': existed},
    )
