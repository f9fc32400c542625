"""API routes for the newsfeed: posts, comments and tags."""

from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from selfmanager.core.exceptions import SelfManagerError
from selfmanager.core.logger import selfmanager_logger as logger
from selfmanager.manager.newsfeed import DEFAULT_PAGE_SIZE, extract_url_metadata
from selfmanager.manager.workspace import UserWorkspace
from selfmanager.server.dependencies import get_user_workspace
from selfmanager.storage.data_models.newsfeed import (
    DEFAULT_TAG_COLOR,
    NewsfeedComment,
    NewsfeedPost,
    NewsfeedTag,
)

app = APIRouter(prefix='/api/newsfeed')


class TagResponse(BaseModel):
    id: str
    name: str
    color: str
    created_at: str


class CommentResponse(BaseModel):
    id: str
    post_id: str
    content: str
    created_at: str


class PostResponse(BaseModel):
    id: str
    title: str
    content: str
    url: str | None
    post_type: str
    url_metadata: dict[str, str]
    is_archived: bool
    created_at: str
    updated_at: str
    tags: list[TagResponse]
    comments: list[CommentResponse]
    pending_sync: bool = False


class CreatePostRequest(BaseModel):
    title: str
    content: str = ''
    url: str | None = None
    post_type: str = 'link'
    tag_ids: list[str] = Field(default_factory=list)


class UpdatePostRequest(BaseModel):
    title: str | None = None
    content: str | None = None
    url: str | None = None
    post_type: str | None = None


class CommentRequest(BaseModel):
    content: str


class TagRequest(BaseModel):
    name: str
    color: str = DEFAULT_TAG_COLOR


class TagIdsRequest(BaseModel):
    tag_ids: list[str]


def tag_to_response(tag: NewsfeedTag) -> TagResponse:
    return TagResponse(**asdict(tag))


def comment_to_response(comment: NewsfeedComment) -> CommentResponse:
    return CommentResponse(**asdict(comment))


def post_to_response(post: NewsfeedPost, workspace: UserWorkspace) -> PostResponse:
    fields = asdict(post)
    fields.pop('tag_ids')
    return PostResponse(
        **fields,
        tags=[tag_to_response(t) for t in workspace.newsfeed.tags_for(post)],
        comments=[comment_to_response(c) for c in workspace.newsfeed.comments_for(post.id)],
        pending_sync=workspace.stores.newsfeed_posts.is_pending(post.id),
    )


@app.get('/posts', response_model=list[PostResponse])
async def list_posts(
    page: int = Query(0, ge=0),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=100),
    tags: list[str] | None = Query(None),
    search: str | None = None,
    post_type: str | None = None,
    workspace: UserWorkspace = Depends(get_user_workspace),
) -> list[PostResponse]:
    """One page of unarchived posts, newest first."""
    posts = workspace.newsfeed.list_posts(
        page=page, limit=limit, tag_ids=tags, search=search, post_type=post_type
    )
    return [post_to_response(p, workspace) for p in posts]


@app.post(
    '/posts',
    response_model=PostResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {'description': 'Post created'},
        400: {'description': 'Invalid post'},
        404: {'description': 'Unknown tag'},
        500: {'description': 'Error creating post'},
    },
)
async def create_post(
    request_body: CreatePostRequest,
    workspace: UserWorkspace = Depends(get_user_workspace),
) -> PostResponse:
    try:
        post = await workspace.newsfeed.create_post(**request_body.model_dump())
        return post_to_response(post, workspace)
    except SelfManagerError:
        raise
    except Exception as e:
        logger.error(f'Error creating post: {e}')
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail='Error creating post',
        )


@app.patch('/posts/{post_id}', response_model=PostResponse)
async def update_post(
    post_id: str,
    request_body: UpdatePostRequest,
    workspace: UserWorkspace = Depends(get_user_workspace),
) -> PostResponse:
    post = await workspace.newsfeed.update_post(post_id, **request_body.model_dump(exclude_none=True))
    return post_to_response(post, workspace)


@app.post('/posts/{post_id}/archive', response_model=PostResponse)
async def archive_post(
    post_id: str,
    workspace: UserWorkspace = Depends(get_user_workspace),
) -> PostResponse:
    post = await workspace.newsfeed.archive_post(post_id)
    return post_to_response(post, workspace)


@app.post('/posts/{post_id}/tags', response_model=PostResponse)
async def add_tags_to_post(
    post_id: str,
    request_body: TagIdsRequest,
    workspace: UserWorkspace = Depends(get_user_workspace),
) -> PostResponse:
    post = await workspace.newsfeed.add_tags_to_post(post_id, request_body.tag_ids)
    return post_to_response(post, workspace)


@app.delete('/posts/{post_id}')
async def delete_post(
    post_id: str,
    workspace: UserWorkspace = Depends(get_user_workspace),
) -> JSONResponse:
    existed = await workspace.newsfeed.delete_post(post_id)
    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content={'message': f'Post {post_id} deleted', 'existed': existed},
    )


@app.post(
    '/posts/{post_id}/comments',
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_comment(
    post_id: str,
    request_body: CommentRequest,
    workspace: UserWorkspace = Depends(get_user_workspace),
) -> CommentResponse:
    comment = await workspace.newsfeed.add_comment(post_id, request_body.content)
    return comment_to_response(comment)


@app.delete('/comments/{comment_id}')
async def delete_comment(
    comment_id: str,
    workspace: UserWorkspace = Depends(get_user_workspace),
) -> JSONResponse:
    existed = await workspace.newsfeed.delete_comment(comment_id)
    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content={'message': f'Comment {comment_id} deleted', 'existed': existed},
    )


@app.get('/tags', response_model=list[TagResponse])
async def list_tags(
    workspace: UserWorkspace = Depends(get_user_workspace),
) -> list[TagResponse]:
    return [tag_to_response(t) for t in workspace.newsfeed.list_tags()]


@app.post('/tags', response_model=TagResponse, status_code=status.HTTP_201_CREATED)
async def create_tag(
    request_body: TagRequest,
    workspace: UserWorkspace = Depends(get_user_workspace),
) -> TagResponse:
    tag = await workspace.newsfeed.create_tag(request_body.name, request_body.color)
    return tag_to_response(tag)


@app.put('/tags/{tag_id}', response_model=TagResponse)
async def update_tag(
    tag_id: str,
    request_body: TagRequest,
    workspace: UserWorkspace = Depends(get_user_workspace),
) -> TagResponse:
    tag = await workspace.newsfeed.update_tag(tag_id, request_body.name, request_body.color)
    return tag_to_response(tag)


@app.delete('/tags/{tag_id}')
async def delete_tag(
    tag_id: str,
    workspace: UserWorkspace = Depends(get_user_workspace),
) -> JSONResponse:
    existed = await workspace.newsfeed.delete_tag(tag_id)
    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content={'message': f'Tag {tag_id} deleted', 'existed': existed},
    )


@app.get('/url-metadata')
async def get_url_metadata(url: str) -> dict[str, str]:
    """Site name, title and description guessed from a link."""
    return extract_url_metadata(url)
