from decimal import Decimal


class SplitBillError(Exception):
    """Base for split bill failures. Routes map `status_code` onto the HTTP response."""

    status_code = 400
    kind = "split_bill_error"
    message = "Split bill error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)


class ValidationError(SplitBillError):
    kind = "validation_error"


class MissingDescription(ValidationError):
    kind = "missing_description"
    message = "Description is required"


class InvalidAmount(ValidationError):
    kind = "invalid_amount"
    message = "Total amount must be greater than 0"


class NoParticipants(ValidationError):
    kind = "no_participants"
    message = "At least one participant is required"


class InvalidParticipant(ValidationError):
    kind = "invalid_participant"
    message = "Each participant must have a valid user id and an amount greater than 0"


class DuplicateParticipant(ValidationError):
    kind = "duplicate_participant"
    message = "Duplicate participants are not allowed"


class SelfOnlySplit(ValidationError):
    kind = "self_only_split"
    message = "Cannot create split bill with only yourself"


class ShareTooSmall(InvalidAmount):
    kind = "share_too_small"
    message = "Amount is too small to split between all participants"


class InvalidPercentages(ValidationError):
    kind = "invalid_percentages"
    message = "Percentages must add up to 100"


class AmountMismatch(ValidationError):
    kind = "amount_mismatch"

    def __init__(self, total_amount: Decimal, participant_total: Decimal):
        self.total_amount = total_amount
        self.participant_total = participant_total
        super().__init__(
            f"Total amount ({total_amount}) must equal sum of participant amounts ({participant_total})"
        )


class ParticipantNotFound(SplitBillError):
    status_code = 404
    kind = "participant_not_found"
    message = "You are not a participant in this bill"


class ParticipantRejected(SplitBillError):
    kind = "participant_rejected"
    message = "You have already rejected this bill"


class ParticipantAlreadyPaid(SplitBillError):
    kind = "participant_already_paid"
    message = "Payment already marked as paid"


class CannotRejectOwnBill(SplitBillError):
    kind = "cannot_reject_own_bill"
    message = "Cannot reject your own bill"


class BillAlreadySettled(SplitBillError):
    kind = "bill_already_settled"
    message = "Bill already settled"
