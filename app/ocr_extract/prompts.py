"""Recognition prompts per document kind."""

from __future__ import annotations

DNI_PROMPT = """
Analiza este documento de identidad español (DNI o NIE) y devuelve un objeto JSON con estas claves:
{
  "nombre": "nombre y apellidos completos",
  "dni": "número de DNI/NIE",
  "fechaNacimiento": "fecha de nacimiento (DD/MM/AAAA)",
  "direccion": "domicilio: calle, número, piso y puerta",
  "poblacion": "municipio y código postal",
  "fechaCaducidad": "fecha de validez (DD/MM/AAAA)"
}

Instrucciones:
- DIRECCION con tipo de vía, número, piso y puerta cuando se vean. Ejemplo: "C/ MAYOR 123, 2º A".
- POBLACION con municipio y código postal cuando se vean. Ejemplo: "MADRID 28001".
- Si el domicilio aparece en una sola línea, sepáralo en direccion y poblacion.
- Usa null para cualquier campo que no sea visible o legible.

Responde solo con el JSON, sin texto adicional.
"""

FICHA_PROMPT = """
Analiza esta ficha técnica de vehículo española (tarjeta ITV) y devuelve un objeto JSON con estas claves:
{
  "marca": "D.1 Marca",
  "modelo": "D.2 Tipo/Variante/Versión",
  "denominacionComercial": "D.3 Denominación comercial",
  "matricula": "matrícula",
  "bastidor": "E Número de identificación (VIN/bastidor)",
  "fechaMatriculacion": "fecha de primera matriculación",
  "categoria": "J Categoría",
  "carroceria": "J.1 Carrocería",
  "clase": "J.2 Clase",
  "cilindrada": "P.1 Cilindrada (cm³)",
  "potencia": "P.2 Potencia (kW o CV)",
  "potenciaFiscal": "P.2.1 Potencia fiscal",
  "combustible": "P.3 Combustible o fuente de energía",
  "codigoMotor": "P.5 Código del motor",
  "fabricanteMotor": "P.5.1 Fabricante del motor",
  "plazasAsiento": "S.1 Plazas de asiento",
  "plazasPie": "S.2 Plazas de pie",
  "velocidadMaxima": "T Velocidad máxima",
  "masaOrdenMarcha": "G Masa en orden de marcha",
  "masaMaxima": "F.2 MMA en circulación",
  "masaMaximaTecnica": "F.1 MMTA",
  "dimensionesNeumaticos": "L.2 Neumáticos",
  "numeroEjes": "L Número de ejes y ruedas",
  "ejesMotrices": "L.1 Ejes motrices",
  "distanciaEjes": "M.1 Distancia entre ejes",
  "longitud": "F.6 Longitud total",
  "anchura": "F.5 Anchura total",
  "altura": "F.4 Altura total",
  "masaRemolcable": "O.1 Masa remolcable con frenos",
  "color": "R Color",
  "emisiones": "V.7 Emisiones de CO2",
  "nivelEmisiones": "V.9 Nivel de emisiones",
  "homologacion": "K Número de homologación",
  "procedencia": "D.6 Procedencia"
}

Instrucciones:
- Usa los códigos de campo impresos (D.1, E, F.2, P.3...) para localizar cada dato.
- Fechas en formato DD/MM/AAAA cuando sea posible.
- Incluye la unidad en masas (kg) y potencia (kW o CV) si aparece.
- Usa null para cualquier campo que no sea visible o legible.

Responde solo con el JSON, sin texto adicional.
"""

PROMPTS = {
    "dni": DNI_PROMPT,
    "ficha": FICHA_PROMPT,
}
