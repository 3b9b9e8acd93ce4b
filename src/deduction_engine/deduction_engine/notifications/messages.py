"""Arabic notification texts (RTL) for attendance and deduction messages."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from html import escape
from typing import Optional

from ..core.enums import ProcessType

NOT_RECORDED = "غير مسجل"
CURRENCY = "ر.س"
DEFAULT_DEDUCTION_REASON = "خصم"
DEDUCTION_TITLE = "إشعار خصم الحضور"


def _money(amount: Decimal) -> str:
    return f"{Decimal(amount):.2f} {CURRENCY}"


def attendance_title(process_type: ProcessType) -> str:
    if process_type is ProcessType.MORNING:
        return "تم تسجيل حضورك"
    return "ملخص الحضور اليومي"


def attendance_body(
    process_type: ProcessType,
    *,
    in_time: Optional[str],
    out_time: Optional[str],
    late_minutes: int,
    deduction_amount: Decimal,
) -> str:
    if process_type is ProcessType.MORNING:
        body = f"تم تسجيل دخولك الساعة {in_time}"
        if late_minutes > 0:
            body += f" - تأخير {late_minutes} دقيقة"
        return body

    body = f"دخول: {in_time or NOT_RECORDED} - خروج: {out_time or NOT_RECORDED}"
    if deduction_amount > 0:
        body += f" - خصم: {_money(deduction_amount)}"
    return body


def attendance_email_html(*, title: str, body: str, target_date: date) -> str:
    return (
        '<div dir="rtl" style="font-family: Arial, sans-serif;">'
        f"<h2>{escape(title)}</h2>"
        f"<p>{escape(body)}</p>"
        f"<p>التاريخ: {target_date:%Y-%m-%d}</p>"
        "</div>"
    )


def deduction_body(*, amount: Decimal, target_date: date, reason: str) -> str:
    return f"تم تسجيل خصم بمبلغ {_money(amount)} بتاريخ {target_date:%Y-%m-%d}. السبب: {reason}"


def deduction_email_html(
    *,
    body: str,
    target_date: date,
    in_time: Optional[str],
    out_time: Optional[str],
    amount: Decimal,
    reason: str,
) -> str:
    rows = [
        ("التاريخ:", f"{target_date:%Y-%m-%d}"),
        ("وقت الدخول:", in_time or NOT_RECORDED),
        ("وقت الخروج:", out_time or NOT_RECORDED),
        ("مبلغ الخصم:", _money(amount)),
        ("السبب:", reason),
    ]
    cells = "".join(
        '<tr><td style="padding: 8px; border: 1px solid #ddd;"><strong>'
        f"{escape(label)}</strong></td>"
        f'<td style="padding: 8px; border: 1px solid #ddd;">{escape(value)}</td></tr>'
        for label, value in rows
    )
    return (
        '<div dir="rtl" style="font-family: Arial, sans-serif; padding: 20px;">'
        f'<h2 style="color: #e53e3e;">{DEDUCTION_TITLE}</h2>'
        f"<p>{escape(body)}</p>"
        f'<table style="width: 100%; border-collapse: collapse; margin-top: 15px;">{cells}</table>'
        '<p style="margin-top: 20px; color: #666; font-size: 12px;">'
        "ملاحظة: سيتم مراجعة واعتماد الخصومات في يوم 24 من كل شهر."
        "</p></div>"
    )
