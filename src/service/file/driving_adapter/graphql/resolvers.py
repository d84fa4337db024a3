import strawberry

from src.platform.config.di import container
from src.platform.graphql.context import GraphQLInfo
from src.service.file.driving_adapter.graphql.types import RemoteFile, UploadFileResponse


@strawberry.type
class FileMutation:
    @strawberry.mutation
    async def upload_file(self, info: GraphQLInfo, extension: str) -> UploadFileResponse:
        result = await container.file_use_case().create_file_upload_url(
            user_id=info.context.user_id, extension=extension
        )
        return UploadFileResponse(file=RemoteFile.from_entity(result.file), upload_url=result.url)
