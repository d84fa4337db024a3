"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/examples/fastapi-sqlalchemy.html
"""

from dependency_injector import containers, providers

from src.platform.config.core_setting import Settings
from src.platform.database.orm_db_setting import Database
from src.platform.message_queue.arq_queue import ArqJobQueue
from src.platform.state.redis_client import redis_client
from src.service.cabin.app.command.cabin_use_case import CabinUseCase
from src.service.cabin.app.query.cabin_query_use_case import CabinQueryUseCase
from src.service.cabin.driven_adapter.repo.cabin_repo_impl import CabinRepoImpl
from src.service.document.app.command.document_use_case import DocumentUseCase
from src.service.document.driven_adapter.repo.document_repo_impl import DocumentRepoImpl
from src.service.event.app.command.event_command_use_case import EventCommandUseCase
from src.service.event.app.command.sign_up_use_case import SignUpUseCase
from src.service.event.app.command.wait_list_use_case import WaitListUseCase
from src.service.event.app.query.event_query_use_case import EventQueryUseCase
from src.service.event.app.query.sign_up_query_use_case import SignUpQueryUseCase
from src.service.event.driven_adapter.repo.event_repo_impl import EventRepoImpl
from src.service.event.driven_adapter.repo.sign_up_repo_impl import SignUpRepoImpl
from src.service.file.app.command.file_use_case import FileUseCase
from src.service.file.driven_adapter.repo.file_repo_impl import FileRepoImpl
from src.service.file.driven_adapter.storage.s3_blob_storage_impl import S3BlobStorageImpl
from src.service.listing.app.command.listing_use_case import ListingUseCase
from src.service.listing.driven_adapter.repo.listing_repo_impl import ListingRepoImpl
from src.service.mail.app.command.send_email_use_case import SendEmailUseCase
from src.service.mail.driven_adapter.email.postmark_client_impl import PostmarkClientImpl
from src.service.mail.driven_adapter.message_queue.mail_publisher_impl import MailPublisherImpl
from src.service.organization.app.command.member_use_case import MemberUseCase
from src.service.organization.app.command.organization_command_use_case import (
    OrganizationCommandUseCase,
)
from src.service.organization.app.query.organization_query_use_case import (
    OrganizationQueryUseCase,
)
from src.service.organization.app.query.permission_service import PermissionService
from src.service.organization.driven_adapter.repo.member_repo_impl import MemberRepoImpl
from src.service.organization.driven_adapter.repo.organization_repo_impl import (
    OrganizationRepoImpl,
)
from src.service.product.app.command.order_use_case import OrderUseCase
from src.service.product.app.command.payment_use_case import PaymentUseCase
from src.service.product.app.command.product_use_case import ProductUseCase
from src.service.product.driven_adapter.payment.vipps_client_impl import VippsClientImpl
from src.service.product.driven_adapter.repo.order_repo_impl import OrderRepoImpl
from src.service.product.driven_adapter.repo.product_repo_impl import ProductRepoImpl
from src.service.user.app.command.authenticate_use_case import AuthenticateUseCase
from src.service.user.app.command.user_command_use_case import UserCommandUseCase
from src.service.user.app.query.user_query_use_case import UserQueryUseCase
from src.service.user.driven_adapter.auth.feide_client_impl import FeideClientImpl
from src.service.user.driven_adapter.auth.redis_auth_state_store import RedisAuthStateStore
from src.service.user.driven_adapter.repo.user_command_repo_impl import UserCommandRepoImpl
from src.service.user.driven_adapter.repo.user_query_repo_impl import UserQueryRepoImpl
from src.service.user.driving_adapter.http_controller.auth.jwt_auth import JwtAuth


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    # Infrastructure
    database = providers.Singleton(Database)
    redis = providers.Object(redis_client)
    job_queue = providers.Singleton(ArqJobQueue)

    # Gateways
    feide_client = providers.Singleton(FeideClientImpl)
    vipps_client = providers.Singleton(VippsClientImpl)
    email_client = providers.Singleton(PostmarkClientImpl)
    blob_storage = providers.Singleton(S3BlobStorageImpl)
    auth_state_store = providers.Singleton(RedisAuthStateStore, redis=redis)
    mail_publisher = providers.Singleton(MailPublisherImpl, job_queue=job_queue)

    # Auth service
    jwt_auth = providers.Singleton(JwtAuth)

    # Repositories (stateless - use session_factory per-request)
    user_command_repo = providers.Singleton(
        UserCommandRepoImpl, session_factory=database.provided.session
    )
    user_query_repo = providers.Singleton(
        UserQueryRepoImpl, session_factory=database.provided.session
    )
    organization_repo = providers.Singleton(
        OrganizationRepoImpl, session_factory=database.provided.session
    )
    member_repo = providers.Singleton(MemberRepoImpl, session_factory=database.provided.session)
    event_repo = providers.Singleton(EventRepoImpl, session_factory=database.provided.session)
    sign_up_repo = providers.Singleton(SignUpRepoImpl, session_factory=database.provided.session)
    cabin_repo = providers.Singleton(CabinRepoImpl, session_factory=database.provided.session)
    document_repo = providers.Singleton(
        DocumentRepoImpl, session_factory=database.provided.session
    )
    file_repo = providers.Singleton(FileRepoImpl, session_factory=database.provided.session)
    listing_repo = providers.Singleton(ListingRepoImpl, session_factory=database.provided.session)
    product_repo = providers.Singleton(ProductRepoImpl, session_factory=database.provided.session)
    order_repo = providers.Singleton(OrderRepoImpl, session_factory=database.provided.session)

    permission_service = providers.Singleton(
        PermissionService,
        member_repo=member_repo,
        organization_repo=organization_repo,
        user_query_repo=user_query_repo,
    )

    # User
    user_query_use_case = providers.Singleton(UserQueryUseCase, user_query_repo=user_query_repo)
    user_command_use_case = providers.Singleton(
        UserCommandUseCase,
        user_command_repo=user_command_repo,
        user_query_repo=user_query_repo,
        mail_publisher=mail_publisher,
    )
    authenticate_use_case = providers.Singleton(
        AuthenticateUseCase,
        feide_client=feide_client,
        auth_state_store=auth_state_store,
        user_query_repo=user_query_repo,
        user_command_use_case=user_command_use_case,
    )

    # Organization
    organization_command_use_case = providers.Singleton(
        OrganizationCommandUseCase,
        organization_repo=organization_repo,
        permission_service=permission_service,
    )
    organization_query_use_case = providers.Singleton(
        OrganizationQueryUseCase, organization_repo=organization_repo
    )
    member_use_case = providers.Singleton(
        MemberUseCase, member_repo=member_repo, permission_service=permission_service
    )

    # Files
    file_use_case = providers.Singleton(
        FileUseCase, file_repo=file_repo, blob_storage=blob_storage
    )

    # Products and payments
    product_use_case = providers.Singleton(
        ProductUseCase, product_repo=product_repo, permission_service=permission_service
    )
    order_use_case = providers.Singleton(
        OrderUseCase,
        order_repo=order_repo,
        product_repo=product_repo,
        permission_service=permission_service,
    )
    payment_use_case = providers.Singleton(
        PaymentUseCase,
        order_repo=order_repo,
        product_repo=product_repo,
        vipps_client=vipps_client,
        job_queue=job_queue,
        permission_service=permission_service,
    )

    # Events
    event_command_use_case = providers.Singleton(
        EventCommandUseCase,
        event_repo=event_repo,
        permission_service=permission_service,
        product_use_case=product_use_case,
        job_queue=job_queue,
    )
    event_query_use_case = providers.Singleton(EventQueryUseCase, event_repo=event_repo)
    sign_up_use_case = providers.Singleton(
        SignUpUseCase,
        event_repo=event_repo,
        sign_up_repo=sign_up_repo,
        user_query_repo=user_query_repo,
        permission_service=permission_service,
        order_use_case=order_use_case,
        job_queue=job_queue,
    )
    sign_up_query_use_case = providers.Singleton(
        SignUpQueryUseCase,
        event_repo=event_repo,
        sign_up_repo=sign_up_repo,
        user_query_repo=user_query_repo,
        permission_service=permission_service,
    )
    wait_list_use_case = providers.Singleton(
        WaitListUseCase,
        event_repo=event_repo,
        sign_up_repo=sign_up_repo,
        user_query_repo=user_query_repo,
        order_use_case=order_use_case,
        mail_publisher=mail_publisher,
    )

    # Cabins
    cabin_use_case = providers.Singleton(
        CabinUseCase,
        cabin_repo=cabin_repo,
        permission_service=permission_service,
        mail_publisher=mail_publisher,
        file_use_case=file_use_case,
    )
    cabin_query_use_case = providers.Singleton(
        CabinQueryUseCase,
        cabin_repo=cabin_repo,
        permission_service=permission_service,
        file_use_case=file_use_case,
    )

    # Documents and listings
    document_use_case = providers.Singleton(
        DocumentUseCase,
        document_repo=document_repo,
        permission_service=permission_service,
        file_use_case=file_use_case,
    )
    listing_use_case = providers.Singleton(
        ListingUseCase, listing_repo=listing_repo, permission_service=permission_service
    )

    # Mail (worker)
    send_email_use_case = providers.Singleton(
        SendEmailUseCase,
        email_client=email_client,
        user_query_repo=user_query_repo,
        event_repo=event_repo,
        cabin_repo=cabin_repo,
    )


container = Container()


def setup() -> None:
    container.config_service()


async def cleanup() -> None:
    await container.job_queue().close()
    await container.vipps_client().aclose()
    await container.email_client().aclose()
    await container.feide_client().aclose()
    container.reset_singletons()
