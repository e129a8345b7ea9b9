# peluqueria/data.py

APPOINTMENT_STATES = ("pendiente", "confirmada", "completada", "cancelada")
DEFAULT_APPOINTMENT_STATE = "pendiente"
COMPLETED_STATE = "completada"

PAYMENT_METHODS = {
    "efectivo": "Efectivo",
    "tarjeta_debito": "Tarjeta Débito",
    "tarjeta_credito": "Tarjeta Crédito",
    "transferencia": "Transferencia",
    "pse": "PSE",
    "nequi": "Nequi",
    "daviplata": "Daviplata",
}


def payment_label(metodo):
    return PAYMENT_METHODS.get(metodo, metodo)
