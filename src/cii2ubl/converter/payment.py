"""
Payment instructions (BG-16 to BG-19) and payment terms (BT-20).

Payment means codes (UNTDID 4461) are grouped by the information they need:

    30, 58       credit transfer, needs the payee account (BG-17)
    48           payment card (BG-18)
    49, 59       direct debit (BG-19)
    1, 42, 57, 68  accepted without further payment details

A payee account given with code 42 is mapped as well. Every other code is
rejected with an error and produces no PaymentMeans.
"""

import logging
from xml.etree import ElementTree as ET

from ..cii.reader import CIIDocument, find, findall, text
from ..ubl.builder import aggregate, basic
from .context import SETTLEMENT_PATH, MappingContext
from .parties import add_party_identification
from .values import copy_code, copy_id, copy_text

logger = logging.getLogger(__name__)

CREDIT_TRANSFER_CODES = frozenset({"30", "58"})
PAYMENT_CARD_CODES = frozenset({"48"})
DIRECT_DEBIT_CODES = frozenset({"49", "59"})
OTHER_PAYMENT_MEANS_CODES = frozenset({"1", "42", "57", "68"})

SUPPORTED_PAYMENT_MEANS_CODES = (
    CREDIT_TRANSFER_CODES | PAYMENT_CARD_CODES | DIRECT_DEBIT_CODES | OTHER_PAYMENT_MEANS_CODES
)

# Codes for which a payee account is mapped when present
PAYEE_ACCOUNT_CODES = CREDIT_TRANSFER_CODES | {"42"}

# Scheme of the SEPA creditor identifier (BT-90) on the seller
SEPA_SCHEME_ID = "SEPA"

MEANS_PATH = f"{SETTLEMENT_PATH}/SpecifiedTradeSettlementPaymentMeans"


def _map_payee_account(
    ctx: MappingContext, payment_means: ET.Element, means: ET.Element, code: str
) -> None:
    # BG-17
    account = find(means, 'ram:PayeePartyCreditorFinancialAccount')
    if account is None:
        if code in CREDIT_TRANSFER_CODES:
            ctx.errors.error(
                "The element 'PayeePartyCreditorFinancialAccount' is missing for Credit Transfer",
                MEANS_PATH,
            )
        return

    financial_account = aggregate(payment_means, 'PayeeFinancialAccount')
    # BT-84, IBAN or proprietary ID
    account_id = find(account, 'ram:IBANID')
    if text(account_id) is None:
        account_id = find(account, 'ram:ProprietaryID')
    if copy_id(financial_account, 'ID', account_id, with_scheme=False) is None:
        ctx.errors.error(
            "Mandatory business term BT-84 (Payment account identifier) is missing",
            f"{MEANS_PATH}/PayeePartyCreditorFinancialAccount",
        )
    # BT-85
    copy_text(financial_account, 'Name', find(account, 'ram:AccountName'))
    # BT-86
    bic = find(means, 'ram:PayeeSpecifiedCreditorFinancialInstitution/ram:BICID')
    if text(bic):
        copy_id(aggregate(financial_account, 'FinancialInstitutionBranch'), 'ID', bic, with_scheme=False)


def _map_cards(ctx: MappingContext, payment_means: ET.Element, means: ET.Element) -> None:
    # BG-18
    cards = findall(means, 'ram:ApplicableTradeSettlementFinancialCard')
    if not cards:
        ctx.errors.error(
            "The element 'ApplicableTradeSettlementFinancialCard' is missing for Payment Card Information",
            MEANS_PATH,
        )
        return
    if not ctx.shape.multiple_card_accounts:
        cards = cards[:1]

    network_id = ctx.config.card_account_network_id
    for card in cards:
        card_account = aggregate(payment_means, 'CardAccount')
        # BT-87
        if copy_id(card_account, 'PrimaryAccountNumberID', find(card, 'ram:ID'), with_scheme=False) is None:
            ctx.errors.error(
                "The Payment card primary account number is missing",
                f"{MEANS_PATH}/ApplicableTradeSettlementFinancialCard/ID",
            )
        if network_id:
            basic(card_account, 'NetworkID', network_id)
        else:
            ctx.errors.error("The Payment card network ID is missing", MEANS_PATH)
        # BT-88
        copy_text(card_account, 'HolderName', find(card, 'ram:CardholderName'))


def _map_direct_debit(
    ctx: MappingContext, payment_means: ET.Element, means: ET.Element, settlement: ET.Element
) -> None:
    # BG-19
    mandate = aggregate(payment_means, 'PaymentMandate')
    # BT-89
    for terms in findall(settlement, 'ram:SpecifiedTradePaymentTerms'):
        if copy_id(mandate, 'ID', find(terms, 'ram:DirectDebitMandateID')) is not None:
            break
    # BT-91
    debtor_iban = find(means, 'ram:PayerPartyDebtorFinancialAccount/ram:IBANID')
    if text(debtor_iban):
        payer_account = aggregate(mandate, 'PayerFinancialAccount')
        copy_id(payer_account, 'ID', debtor_iban, with_scheme=False)
        debtor_bic = find(means, 'ram:PayerSpecifiedDebtorFinancialInstitution/ram:BICID')
        if text(debtor_bic):
            copy_id(aggregate(payer_account, 'FinancialInstitutionBranch'), 'ID', debtor_bic, with_scheme=False)

    # BT-90
    creditor_reference = text(settlement, 'ram:CreditorReferenceID')
    if creditor_reference and ctx.seller_party is not None:
        add_party_identification(ctx.seller_party, creditor_reference, SEPA_SCHEME_ID)


def map_payment_means(ctx: MappingContext, cii: CIIDocument, root: ET.Element) -> None:
    settlement = cii.settlement
    payment_references = [r for r in findall(settlement, 'ram:PaymentReference') if text(r)]
    mapped = 0

    for means in findall(settlement, 'ram:SpecifiedTradeSettlementPaymentMeans'):
        type_code = find(means, 'ram:TypeCode')
        code = text(type_code)
        if code is None:
            ctx.errors.error(
                "Mandatory business term BT-81 (Payment means type code) is missing",
                f"{MEANS_PATH}/TypeCode",
            )
            continue
        if code not in SUPPORTED_PAYMENT_MEANS_CODES:
            ctx.errors.error(
                f"Failed to determine a supported Payment Means Type from code '{code}'",
                f"{MEANS_PATH}/TypeCode",
            )
            continue

        payment_means = aggregate(root, 'PaymentMeans')
        # BT-81, BT-82
        information = [i for i in findall(means, 'ram:Information') if text(i)]
        element = copy_code(payment_means, 'PaymentMeansCode', type_code)
        if information:
            element.set('name', text(information[0]))

        if not ctx.is_invoice:
            basic(payment_means, 'PaymentDueDate', ctx.due_date)

        # BT-83
        for reference in payment_references:
            copy_text(payment_means, 'PaymentID', reference)

        if code in PAYEE_ACCOUNT_CODES:
            _map_payee_account(ctx, payment_means, means, code)
        elif code in PAYMENT_CARD_CODES:
            _map_cards(ctx, payment_means, means)
        elif code in DIRECT_DEBIT_CODES:
            _map_direct_debit(ctx, payment_means, means, settlement)

        mapped += 1
        logger.debug(f"Mapped payment means code {code}")

    if not ctx.is_invoice and ctx.due_date and not mapped:
        ctx.errors.warning(
            "The due date cannot be mapped to a CreditNote without payment means",
            f"{SETTLEMENT_PATH}/SpecifiedTradePaymentTerms/DueDateDateTime",
        )


def map_payment_terms(ctx: MappingContext, cii: CIIDocument, root: ET.Element) -> None:
    # BT-20
    notes = [
        description
        for terms in findall(cii.settlement, 'ram:SpecifiedTradePaymentTerms')
        for description in findall(terms, 'ram:Description')
        if text(description)
    ]
    if not notes:
        return
    payment_terms = aggregate(root, 'PaymentTerms')
    for note in notes:
        copy_text(payment_terms, 'Note', note)
