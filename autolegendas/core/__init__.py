"""
Pacote Core do AutoLegendas.

Este pacote contém os módulos que executam as etapas do pipeline:

- `validator`: Validação do ano, da codificação e do filtro de UFs.
- `downloader`: Download e descompactação do arquivo de legendas do TSE.
- `processor`: Leitura e agregação dos arquivos por UF.
- `post_processor`: Conversão para ASCII e exportação para .dta/.sav.
"""
