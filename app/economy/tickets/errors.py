class TicketError(Exception):
    pass


class TicketEventNotFoundError(TicketError):
    pass


class TicketEventSoldOutError(TicketError):
    pass


class TicketEventValidationError(TicketError):
    pass


class TicketPurchaseValidationError(TicketError):
    pass


class TicketNotFoundError(TicketError):
    pass
