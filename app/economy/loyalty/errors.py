class LoyaltyError(Exception):
    pass


class LoyaltyAccountNotFoundError(LoyaltyError):
    pass


class LoyaltyInsufficientPointsError(LoyaltyError):
    pass


class LoyaltyRedeemValidationError(LoyaltyError):
    pass


class LoyaltyPointsOverflowError(LoyaltyError):
    pass
