from typing import Optional
from uuid import UUID

import strawberry

from src.platform.config.di import container
from src.platform.graphql.context import GraphQLInfo
from src.service.cabin.domain.cabin_entity import BookingStatus
from src.service.cabin.driving_adapter.graphql.types import (
    AvailabilityCalendarResponse,
    Booking,
    BookingContact,
    BookingInput,
    BookingResponse,
    BookingSemester,
    BookingSemestersResponse,
    BookingsResponse,
    BookingTerms,
    BookingTermsResponse,
    Cabin,
    CabinInput,
    CabinResponse,
    CabinsResponse,
    CalendarInput,
    CalendarMonth,
    NewBookingInput,
    TotalCostInput,
    TotalCostResponse,
    UpdateBookingContactInput,
    UpdateBookingSemesterInput,
    UpdateBookingTermsResponse,
)


@strawberry.type
class CabinQuery:
    @strawberry.field
    async def cabins(self) -> CabinsResponse:
        cabins = await container.cabin_query_use_case().find_many_cabins()
        return CabinsResponse(cabins=[Cabin.from_entity(c) for c in cabins])

    @strawberry.field
    async def bookings(
        self, info: GraphQLInfo, status: Optional[BookingStatus] = None
    ) -> BookingsResponse:
        bookings = await container.cabin_query_use_case().find_many_bookings(
            user_id=info.context.user_id, status=status
        )
        return BookingsResponse(
            bookings=[Booking.from_entity(b) for b in bookings], total=len(bookings)
        )

    @strawberry.field
    async def booking(self, data: BookingInput) -> BookingResponse:
        booking = await container.cabin_query_use_case().get_booking(
            booking_id=data.id, email=data.email
        )
        return BookingResponse(booking=Booking.from_entity(booking))

    @strawberry.field
    async def booking_semesters(self) -> BookingSemestersResponse:
        semesters = await container.cabin_query_use_case().get_booking_semesters()
        return BookingSemestersResponse(
            fall=BookingSemester.from_entity(semesters.fall) if semesters.fall else None,
            spring=BookingSemester.from_entity(semesters.spring) if semesters.spring else None,
        )

    @strawberry.field
    async def booking_contact(self) -> BookingContact:
        contact = await container.cabin_query_use_case().get_booking_contact()
        return BookingContact.from_entity(contact)

    @strawberry.field
    async def booking_terms(self) -> BookingTermsResponse:
        result = await container.cabin_query_use_case().get_booking_terms()
        return BookingTermsResponse(
            booking_terms=BookingTerms.from_entity(result.terms, url=result.url)
        )

    @strawberry.field
    async def total_cost(self, data: TotalCostInput) -> TotalCostResponse:
        total = await container.cabin_query_use_case().total_cost(
            start_date=data.start_date,
            end_date=data.end_date,
            cabin_ids=list(data.cabins),
            guests=data.guests.to_guests(),
        )
        return TotalCostResponse(total_cost=total)

    @strawberry.field
    async def get_availability_calendar(
        self, calendar_data: CalendarInput
    ) -> AvailabilityCalendarResponse:
        months = await container.cabin_query_use_case().get_availability_calendar(
            month=calendar_data.month,
            year=calendar_data.year,
            count=calendar_data.count,
            cabin_ids=list(calendar_data.cabins),
            guests=calendar_data.guests.to_guests(),
        )
        return AvailabilityCalendarResponse(
            calendar_months=[CalendarMonth.from_result(m) for m in months]
        )


@strawberry.type
class CabinMutation:
    @strawberry.mutation
    async def new_booking(self, data: NewBookingInput) -> BookingResponse:
        booking = await container.cabin_use_case().new_booking(data=data.to_data())
        return BookingResponse(booking=Booking.from_entity(booking))

    @strawberry.mutation
    async def update_booking_status(
        self, info: GraphQLInfo, id: UUID, status: BookingStatus
    ) -> BookingResponse:
        booking = await container.cabin_use_case().update_booking_status(
            user_id=info.context.user_id, booking_id=id, status=status
        )
        return BookingResponse(booking=Booking.from_entity(booking))

    @strawberry.mutation
    async def update_booking_semester(
        self, info: GraphQLInfo, data: UpdateBookingSemesterInput
    ) -> BookingSemester:
        semester = await container.cabin_use_case().update_booking_semester(
            user_id=info.context.user_id,
            semester=data.semester,
            start_at=data.start_at,
            end_at=data.end_at,
            bookings_enabled=data.bookings_enabled,
        )
        return BookingSemester.from_entity(semester)

    @strawberry.mutation
    async def update_booking_contact(
        self, info: GraphQLInfo, data: UpdateBookingContactInput
    ) -> BookingContact:
        contact = await container.cabin_use_case().update_booking_contact(
            user_id=info.context.user_id,
            name=data.name,
            email=data.email,
            phone_number=data.phone_number,
        )
        return BookingContact.from_entity(contact)

    @strawberry.mutation
    async def create_cabin(self, info: GraphQLInfo, data: CabinInput) -> CabinResponse:
        cabin = await container.cabin_use_case().create_cabin(
            user_id=info.context.user_id, data=data.to_data()
        )
        return CabinResponse(cabin=Cabin.from_entity(cabin))

    @strawberry.mutation
    async def update_cabin(self, info: GraphQLInfo, id: UUID, data: CabinInput) -> CabinResponse:
        cabin = await container.cabin_use_case().update_cabin(
            user_id=info.context.user_id, cabin_id=id, data=data.to_data()
        )
        return CabinResponse(cabin=Cabin.from_entity(cabin))

    @strawberry.mutation
    async def update_booking_terms(self, info: GraphQLInfo) -> UpdateBookingTermsResponse:
        result = await container.cabin_use_case().update_booking_terms(
            user_id=info.context.user_id
        )
        return UpdateBookingTermsResponse(
            booking_terms=BookingTerms.from_entity(result.terms), upload_url=result.upload_url
        )
