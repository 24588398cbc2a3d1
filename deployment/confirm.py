from deployment.proposal import ProposalSet


def _abort() -> None:
    print("Aborting proposal!")
    exit(-1)


def _continue() -> None:
    """Asks the user to continue."""
    answer = input("Continue Y/N? ")
    if answer.lower().strip() == "n":
        _abort()


def _confirm_proposal(proposal_set: ProposalSet) -> None:
    """Asks the user to confirm the actions of a proposal before it is submitted."""
    print(f"\n{proposal_set.summary()}")
    answer = input(f"Submit proposal with {len(proposal_set)} action(s) Y/N? ")
    if answer.lower().strip() == "n":
        _abort()
